"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class Yt2Mp3Error(Exception):
    """Base exception for all application-specific errors."""


class UsageError(Yt2Mp3Error):
    """Raised when the command line does not describe a runnable download."""


class EmptyArgumentsError(UsageError):
    """Raised when the program is started without any arguments."""


class MissingIdentifierError(UsageError):
    """Raised when neither a URL nor an ID was provided."""


class MissingMediaKindError(UsageError):
    """Raised when a download is requested without selecting a media type."""


class BootstrapError(Yt2Mp3Error):
    """Raised when the ffmpeg binary cannot be fetched or made executable."""


class StreamNotFoundError(Yt2Mp3Error):
    """Raised when a video offers no stream matching the requested media type."""


class TranscodeError(Yt2Mp3Error):
    """Raised when ffmpeg exits with a non-zero status."""
