from typing import Optional


def error_message_detail(error, error_detail) -> str:
    """Format an error with the file and line it was raised from, when known."""
    exc_tb = None
    if error_detail is not None:
        _, _, exc_tb = error_detail.exc_info()

    if exc_tb is None:
        return str(error)

    # Walk to the frame that actually raised
    while exc_tb.tb_next is not None:
        exc_tb = exc_tb.tb_next

    file_name = exc_tb.tb_frame.f_code.co_filename
    return f"Error in [{file_name}] line [{exc_tb.tb_lineno}]: {error}"


class CustomException(Exception):
    """
    Project-wide exception wrapper.

    Usage:
        raise CustomException("message")
        raise CustomException(exc, sys)  # inside an except block
    """

    def __init__(self, error_message, error_detail=None):
        self.error_message = error_message_detail(error_message, error_detail)
        super().__init__(self.error_message)

    def __str__(self):
        return self.error_message


# ---------------------------------------------------------------------
# Receipt extraction failures
# ---------------------------------------------------------------------

class ExtractionError(CustomException):
    """Base class for a failed receipt extraction. One upload, one failure."""


class TransportFailure(ExtractionError):
    """The request to the extraction service could not complete."""


class NoTextResponse(ExtractionError):
    """The extraction service replied without any text content."""

    def __init__(self, error_message: str = "No text response from the extraction model"):
        super().__init__(error_message)


class UnparseableResponse(ExtractionError):
    """No JSON object could be recovered from the model's reply."""

    def __init__(self, raw_text: Optional[str], reason: str = "Failed to parse receipt data"):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(reason)


__all__ = [
    "CustomException",
    "ExtractionError",
    "TransportFailure",
    "NoTextResponse",
    "UnparseableResponse",
    "error_message_detail",
]
