"""Custom exceptions for the mocklite system."""


class MockliteError(Exception):
    """Base exception for mocklite errors."""

    pass


class ConfigError(MockliteError):
    """Raised when a field or table definition is malformed."""

    pass


class IntegrityError(MockliteError):
    """Raised when a foreign key targets a table or column absent from the schema."""

    pass


class StoreError(MockliteError):
    """Raised when the storage engine rejects a write."""

    pass


class NotFoundError(MockliteError):
    """Raised when a request addresses a nonexistent row or table."""

    pass


class ReseedInProgressError(MockliteError):
    """Raised when a re-seed is triggered while another one is running."""

    pass
