"""Narrative generation exceptions."""


class GenerationError(Exception):
    """Raised when the text-generation service fails or returns nothing."""

    def __init__(self, message: str = "Failed to generate story"):
        self.message = message
        super().__init__(message)
