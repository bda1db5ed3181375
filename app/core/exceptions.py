from typing import Any


class CryptanalysisError(Exception):
    """Base exception for all cryptanalysis errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputError(CryptanalysisError, ValueError):
    """Raised when a ciphertext or key is missing or malformed."""

    pass


class CiphertextTooLongError(InvalidInputError):
    """Raised when ciphertext exceeds maximum length."""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Ciphertext length {length} exceeds maximum {max_length}",
            {"length": length, "max_length": max_length},
        )


class InsufficientDataError(CryptanalysisError):
    """Raised when there are too few letters for statistical analysis."""

    def __init__(self, letter_count: int, min_letters: int):
        super().__init__(
            "Ciphertext too short for reliable analysis "
            f"({letter_count} letters, need at least {min_letters})",
            {"letter_count": letter_count, "min_letters": min_letters},
        )


class LexiconLoadError(CryptanalysisError):
    """Raised when the dictionary or known-key file cannot be loaded."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to load lexicon file '{path}': {reason}",
            {"path": path, "reason": reason},
        )
