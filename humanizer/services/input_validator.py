"""
Input Validation Service

This is the GATE before any credit lookup or rewrite call. It guarantees:
- Text is present and is a string
- No whitespace-only input
- No inputs below the minimum length (50 chars)
- No inputs above the maximum length

If ANY condition fails → block with clear, human-readable error.
The same gate runs in the orchestrator and again in the rewrite service,
since the rewrite service can be called directly from a browser.
"""

from typing import Any


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_TEXT_LENGTH = 50
MAX_TEXT_LENGTH = 20000


# =============================================================================
# EXCEPTION CLASS
# =============================================================================

class InputValidationError(Exception):
    """
    Raised when input fails validation.

    Contains a human-readable message suitable for returning to the user.
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# INPUT VALIDATOR SERVICE
# =============================================================================

class InputValidator:
    """
    Validates user input BEFORE any network call occurs.

    This is a GATE, not intelligence.
    """

    def __init__(
        self,
        min_length: int = MIN_TEXT_LENGTH,
        max_length: int = MAX_TEXT_LENGTH
    ):
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, text: Any) -> str:
        """
        Validate the text to humanize and return it unchanged.

        Raises InputValidationError if any validation fails.

        Execution order:
        1. Type check (must be a string)
        2. Presence check (not empty)
        3. Whitespace check
        4. Minimum length
        5. Maximum length
        """
        self._validate_type(text)
        self._validate_presence(text)
        self._validate_not_whitespace_only(text)
        self._validate_min_length(text)
        self._validate_max_length(text)
        return text

    def _validate_type(self, text: Any) -> None:
        if text is None:
            raise InputValidationError(
                "Text parameter is required and must be a string"
            )
        if not isinstance(text, str):
            raise InputValidationError(
                "Text parameter is required and must be a string"
            )

    def _validate_presence(self, text: str) -> None:
        """Validate that text is present (not empty)."""
        if not text:
            raise InputValidationError(
                "Please enter some text to humanize."
            )

    def _validate_not_whitespace_only(self, text: str) -> None:
        if text.strip() == "":
            raise InputValidationError(
                "Please enter some text to humanize."
            )

    def _validate_min_length(self, text: str) -> None:
        # Raw length, matching what the user sees in the character counter
        if len(text) < self.min_length:
            raise InputValidationError(
                f"Text must be at least {self.min_length} characters long "
                "for effective humanization."
            )

    def _validate_max_length(self, text: str) -> None:
        if len(text) > self.max_length:
            raise InputValidationError(
                f"Text is too long ({len(text)} characters). "
                f"Maximum is {self.max_length} characters."
            )
