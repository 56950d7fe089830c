"""Error taxonomy shared by flows, the crop store and the session layer."""


class FlowError(Exception):
    """Base class for every failure a caller is expected to handle."""


class ValidationError(FlowError):
    """Local input is malformed. Raised before any remote call is made."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class RemoteError(FlowError):
    """The generation endpoint could not be reached, timed out or returned an error status."""


class ResponseShapeError(FlowError):
    """The endpoint answered, but the payload does not match the declared output schema."""


class WriteError(FlowError):
    """The record store rejected or failed a write."""


class SubmissionInProgress(FlowError):
    """The same action was submitted again while its first submission is still pending."""
