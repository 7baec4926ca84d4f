"""Ask command dispatcher.

Flow for each chat message:
1. Parse - "!ask <question>" (or an alias), anything else is ignored
2. Gate - global cooldown, rejected commands are only logged
3. Complete - forward the question to Gemini
4. Sanitise - fit the answer into one chat line
5. Reply - or log why nothing was sent
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol

from gemini_client import CompletionKind, CompletionResult
from logger import logger
from . import config
from .cooldown import CooldownGate
from .ratings import format_ratings
from .sanitiser import SanitiseConfig, sanitise

Reply = Callable[[str], Awaitable[object]]


class CompletionClient(Protocol):
    async def complete(self, prompt: str) -> CompletionResult: ...


class DispatchOutcome(Enum):
    """What the dispatcher did with a message."""
    IGNORED = "ignored"
    COOLDOWN = "cooldown"
    REPLIED = "replied"
    WITHHELD = "withheld"              # sanitiser left nothing to send
    RATE_LIMIT_NOTICE = "rate_limit_notice"
    RATE_LIMITED = "rate_limited"      # notice already sent this streak
    FAILED = "failed"


@dataclass
class ChatCommandInvocation:
    """A parsed ask command."""
    channel: str
    invoker: str
    argument: str


def parse_invocation(
    content: str,
    channel: str,
    invoker: str,
    triggers: tuple[str, ...] = config.TRIGGERS
) -> Optional[ChatCommandInvocation]:
    """Parse a chat message into an invocation.

    The first word must be one of the triggers (case-insensitive) and the
    question after it must be non-empty.
    """
    parts = (content or "").strip().split(maxsplit=1)
    if not parts or parts[0].lower() not in triggers:
        return None

    argument = parts[1].strip() if len(parts) > 1 else ""
    if not argument:
        return None

    return ChatCommandInvocation(channel=channel, invoker=invoker, argument=argument)


class AskDispatcher:
    """Wires chat messages through the cooldown gate, Gemini and the sanitiser."""

    def __init__(
        self,
        client: CompletionClient,
        gate: CooldownGate,
        sanitise_config: SanitiseConfig,
        triggers: tuple[str, ...] = config.TRIGGERS,
        prompt_with_username: bool = config.PROMPT_WITH_USERNAME,
        rate_limit_notice: str = config.RATE_LIMIT_NOTICE,
        clock: Callable[[], float] = time.time
    ):
        self.client = client
        self.gate = gate
        self.sanitise_config = sanitise_config
        self.triggers = triggers
        self.prompt_with_username = prompt_with_username
        self.rate_limit_notice = rate_limit_notice
        self.clock = clock

    def build_prompt(self, invocation: ChatCommandInvocation) -> str:
        if self.prompt_with_username:
            return f"{invocation.invoker} asked {invocation.argument}"
        return invocation.argument

    async def handle_message(self, content: str, channel: str, invoker: str, reply: Reply) -> DispatchOutcome:
        """Handle one inbound chat message.

        Args:
            content: Message text
            channel: Channel name the message arrived in
            invoker: Display name of the sender
            reply: Coroutine function posting a reply to the message

        Returns:
            DispatchOutcome describing what was done
        """
        invocation = parse_invocation(content, channel, invoker, self.triggers)
        if invocation is None:
            return DispatchOutcome.IGNORED

        now = self.clock()
        if not self.gate.admit(now):
            logger.info(
                f"[COOLDOWN] {invoker} in #{channel} rejected "
                f"({self.gate.remaining(now):.1f}s left): {invocation.argument}"
            )
            return DispatchOutcome.COOLDOWN

        # Claim the window before awaiting so interleaved handlers see it
        self.gate.mark_accepted(now)

        logger.info(f"[QUESTION] {invoker} in #{channel}: {invocation.argument}")
        result = await self.client.complete(self.build_prompt(invocation))

        return await self._handle_result(result, reply)

    async def _handle_result(self, result: CompletionResult, reply: Reply) -> DispatchOutcome:
        """Branch on the completion outcome."""
        if result.kind == CompletionKind.RATE_LIMITED:
            if self.gate.rate_limit_notice_sent:
                logger.warning("[SYSTEM] Still rate limited, notice already sent")
                return DispatchOutcome.RATE_LIMITED

            await reply(self.rate_limit_notice)
            self.gate.mark_rate_limit_notice()
            logger.warning("[SYSTEM] Rate limited, sent slow-down notice")
            return DispatchOutcome.RATE_LIMIT_NOTICE

        if result.kind == CompletionKind.FAILED:
            logger.error(f"[SYSTEM] Completion failed: {result.error}")
            return DispatchOutcome.FAILED

        self.gate.record_success()
        sanitised = sanitise(result.text, self.sanitise_config)

        if not sanitised:
            logger.info("[SYSTEM] Message failed to send.")
            logger.info(f"  Raw text: {result.text}")
            if result.safety_ratings:
                logger.info("  Ratings:\n" + format_ratings(result.safety_ratings))
            else:
                logger.info("  Ratings: none returned")
            return DispatchOutcome.WITHHELD

        logger.info("[ANSWER]")
        logger.info(f"  Raw text: {result.text}")
        logger.info(f"  Sanitized: {sanitised}")

        await reply(sanitised)
        return DispatchOutcome.REPLIED
