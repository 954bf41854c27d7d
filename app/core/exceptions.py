"""Exceptions shared by the metadata providers, the picker and the API."""


class RerunError(Exception):
    """Base class for all Rerun errors."""


class InvalidRequestError(RerunError):
    """A required request parameter is missing or blank."""


class MetadataError(RerunError):
    """Domain exception for metadata provider failures."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.original_exception = original_exception


class NotFoundError(MetadataError):
    """The provider does not know the requested show or episode."""


class UpstreamError(MetadataError):
    """The provider failed, timed out or returned an unusable payload."""
