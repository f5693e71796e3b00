from __future__ import annotations


class InvalidOptionError(ValueError):
    """A recognized adapter option carried an unusable value."""

    def __init__(self, message: str, option: str | None = None):
        super().__init__(message)
        self.option = option


class HashGenerationError(RuntimeError):
    """Raised in place of returning a failure sentinel."""

    def __init__(self, message: str, sentinel: str):
        super().__init__(message)
        self.sentinel = sentinel
