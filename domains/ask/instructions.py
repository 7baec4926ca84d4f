"""System instruction assembly from the static data files."""

from pathlib import Path

from logger import logger
from . import config


class InstructionLengthError(ValueError):
    """The assembled system instruction is over the length limit."""


def _as_list(text: str) -> str:
    """One-name-per-line file contents to a comma separated list."""
    return ", ".join(line.strip() for line in text.strip().splitlines() if line.strip())


def build_instructions(template: str, substitutions: dict[str, str], limit: int = config.INSTRUCTION_LIMIT) -> str:
    """Fill placeholders in the instruction template and check its length.

    Args:
        template: Raw instruction text with {{PLACEHOLDER}} markers
        substitutions: Placeholder -> newline separated list contents
        limit: Maximum instruction length

    Returns:
        Final system instruction

    Raises:
        InstructionLengthError: If the result exceeds the limit
    """
    result = template
    for placeholder, contents in substitutions.items():
        result = result.replace(placeholder, _as_list(contents))

    if len(result) > limit:
        raise InstructionLengthError(f"System instruction length exceeds {limit} characters ({len(result)}).")

    return result


def load_instructions(data_dir: Path) -> str:
    """Load instructions.txt and the lists it references from data_dir."""
    template = (data_dir / "instructions.txt").read_text(encoding="utf-8")

    substitutions = {}
    for placeholder, filename in config.INSTRUCTION_PLACEHOLDERS.items():
        path = data_dir / filename
        if path.exists():
            substitutions[placeholder] = path.read_text(encoding="utf-8")
        else:
            logger.warning(f"[SYSTEM] {filename} not found, {placeholder} left empty")
            substitutions[placeholder] = ""

    instructions = build_instructions(template, substitutions)
    logger.info(f"[SYSTEM] System instructions loaded ({len(instructions)} characters)")
    return instructions
