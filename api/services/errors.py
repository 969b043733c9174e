"""Publish failures, each carrying the HTTP status it maps to."""


class PublishError(Exception):
    """Base class for errors surfaced to the publishing caller."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(PublishError):
    """Required input missing or unusable. Nothing was written."""

    status_code = 400


class ConflictError(PublishError):
    """A post with the same slug already exists. Nothing was written."""

    status_code = 409


class StorageError(PublishError):
    """A durable write failed. Earlier writes of the same publish may remain."""

    status_code = 500


class CorruptIndexError(PublishError):
    """The persisted blog index could not be parsed.

    Never raised out of the index store: it is logged and the index is
    treated as empty.
    """
