class ShowroomError(Exception):
    """Base class for errors raised by the showroom domain layer."""


class AnalyticsUnavailableError(ShowroomError):
    """An analytics view could not be computed from the vehicle store."""


class InvalidImageSetError(ShowroomError, ValueError):
    """The client supplied a malformed list of images to keep."""


class UploadRejectedError(ShowroomError, ValueError):
    """An uploaded file was refused (count or extension)."""
