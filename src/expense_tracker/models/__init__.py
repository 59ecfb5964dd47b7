from .receipt import RawReceipt, EncodedPayload, MediaType, MEDIA_TYPES
from .expense import (
    ParsedReceipt,
    Expense,
    ExpenseGroup,
    ExpenseCategory,
    ConfidenceLevel,
    CATEGORIES,
    CONFIDENCE_LEVELS,
)
from .upload import UploadOutcome
from .llm import LLMResponse
