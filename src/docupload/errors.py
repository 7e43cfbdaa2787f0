"""Domain errors for docupload."""


class PublishError(RuntimeError):
    """Raised when a requested documentation publish cannot complete."""
