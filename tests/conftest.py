"""Pytest configuration and fixtures."""

import os
import sys
from types import SimpleNamespace
from unittest.mock import Mock, AsyncMock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def make_rating(category: str, probability: str):
    """Build a safety rating shaped like the Gemini SDK's."""
    return SimpleNamespace(category=category, probability=probability)


@pytest.fixture
def full_ratings():
    """One rating per harm category, in provider order."""
    return [
        make_rating("HARM_CATEGORY_SEXUALLY_EXPLICIT", "NEGLIGIBLE"),
        make_rating("HARM_CATEGORY_HATE_SPEECH", "LOW"),
        make_rating("HARM_CATEGORY_HARASSMENT", "MEDIUM"),
        make_rating("HARM_CATEGORY_DANGEROUS_CONTENT", "HIGH"),
    ]


@pytest.fixture
def mock_completion_client():
    """Create a mock Gemini completion client."""
    client = Mock()
    client.complete = AsyncMock()
    return client


@pytest.fixture
def mock_reply():
    """Create a mock chat reply coroutine."""
    return AsyncMock()

