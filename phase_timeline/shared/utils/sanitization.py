"""Input sanitization utilities."""

import re

# Characters that would break the `name;dur=ms` list grammar or a header line
_RESERVED_CHARS = frozenset(",;\"\\")
_CONTROL_PATTERN = re.compile(r"[\x00-\x1f\x7f]")


class PhaseNameSanitizer:
    """Validate caller-supplied phase names before they reach a timeline."""

    DEFAULT_MAX_LENGTH = 100

    @classmethod
    def validate(cls, value: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
        """
        Validate a phase name and return it stripped of surrounding whitespace.

        Raises:
            ValueError: if the name is empty, too long, or contains control
                or reserved characters
        """
        if not isinstance(value, str):
            raise ValueError("Phase name must be a string")

        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Phase name must be a non-empty string")

        if len(cleaned) > max_length:
            raise ValueError(f"Phase name must be {max_length} characters or less")

        if _CONTROL_PATTERN.search(cleaned):
            raise ValueError("Phase name must not contain control characters")

        reserved = sorted(_RESERVED_CHARS.intersection(cleaned))
        if reserved:
            raise ValueError(
                f"Phase name must not contain reserved characters: {''.join(reserved)}"
            )

        return cleaned


def validate_phase_name(
    value: str, max_length: int = PhaseNameSanitizer.DEFAULT_MAX_LENGTH
) -> str:
    """Convenience wrapper around PhaseNameSanitizer.validate"""
    return PhaseNameSanitizer.validate(value, max_length)
