"""Errors raised while talking to the content store and rendering its data."""


class ContentStoreError(Exception):
    """Raised when the content store cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class DocumentNotFoundError(ContentStoreError):
    """Raised when no document matches the requested identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Document not found: {identifier}", status_code=404)


class DataShapeError(Exception):
    """Raised when a content store payload does not have the expected shape."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        self.original_error = original_error
        super().__init__(message)


class FormatError(ValueError):
    """Raised when a publication date is missing or cannot be parsed."""
