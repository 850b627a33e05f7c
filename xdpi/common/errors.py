"""Exception hierarchy for topology queries and reconciliation"""


class XdpiError(Exception):
    """Base class for all xdpi errors"""


class ConnectionUnavailable(XdpiError):
    """The display server cannot be reached through a given backend"""


class ExtensionUnsupported(XdpiError):
    """An extension is absent or older than the feature requires"""

    def __init__(self, extension: str, required: str = "") -> None:
        self.extension = extension
        self.required = required
        message = f"{extension} extension not available"
        if required:
            message = f"{extension} {required} or newer required"
        super().__init__(message)


class QueryFailed(XdpiError):
    """A single output, CRTC or monitor record could not be obtained"""


class InvalidOverride(XdpiError):
    """A font DPI preference is present but unusable"""


class AllocationFailure(XdpiError):
    """Resources ran out while building the records of one screen"""
