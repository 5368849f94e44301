class SplitlahError(Exception):
    """Base class for bill-splitting errors."""


class IngestionFailed(SplitlahError):
    """The receipt could not be extracted: transport error, empty or malformed response."""


class VoiceProcessingFailed(SplitlahError):
    """The voice command could not be interpreted: transport error, empty or malformed response."""


class InvalidReceiptState(SplitlahError):
    """A caller broke a data contract, e.g. an assignment referencing an unknown person."""


class InvalidTransition(SplitlahError):
    def __init__(self, operation: str, step: str):
        self.operation = operation
        self.step = step
        super().__init__(f"{operation} is not allowed while the bill is in step '{step}'")


class RequestInFlight(SplitlahError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} rejected: another receipt or voice request is still running")
