import json
import math
import re
import sys
from datetime import date, datetime

from expense_tracker.logger import get_logger
from expense_tracker.exception import CustomException, ExtractionError, UnparseableResponse
from expense_tracker.agents.prompts import RECEIPT_PROMPT, RECEIPT_FIELD_NAMES
from expense_tracker.components.image_encoder import encode_receipt
from expense_tracker.models import CATEGORIES, CONFIDENCE_LEVELS, Expense, ParsedReceipt, RawReceipt
from expense_tracker.utils.identifiers import generate_id, utc_now_iso

logger = get_logger(__name__)

# Greedy: first "{" to last "}", across newlines
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_AMOUNT_NOISE_RE = re.compile(r"[\s,$€£¥]")

_CATEGORY_LOOKUP = {c.lower(): c for c in CATEGORIES}


# -----------------------------------------------------------
# Field coercion
# -----------------------------------------------------------
# Each coercer returns the cleaned value, or None when the model's value
# cannot be used and the field default applies.

def _coerce_date(value):
    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if not _DATE_RE.fullmatch(candidate):
        return None
    try:
        datetime.strptime(candidate, "%Y-%m-%d")
    except ValueError:
        return None
    return candidate


def _coerce_text(value):
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _coerce_amount(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = _AMOUNT_NOISE_RE.sub("", value)
    elif not isinstance(value, (int, float)):
        return None

    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None

    if not math.isfinite(number) or number < 0:
        return None
    # -0.0 renders as "-0.00"
    return number + 0.0


def _coerce_currency(value):
    text = _coerce_text(value)
    return text.upper() if text else None


def _coerce_category(value):
    text = _coerce_text(value)
    return _CATEGORY_LOOKUP.get(text.lower()) if text else None


def _coerce_confidence(value):
    text = _coerce_text(value)
    if text and text.lower() in CONFIDENCE_LEVELS:
        return text.lower()
    return None


def _today() -> str:
    return date.today().isoformat()


# field -> (coercer, default). Callable defaults are evaluated per record.
FIELD_RULES = {
    "date": (_coerce_date, _today),
    "vendor": (_coerce_text, "Unknown Vendor"),
    "amount": (_coerce_amount, 0.0),
    "currency": (_coerce_currency, "USD"),
    "category": (_coerce_category, "Other"),
    "paymentMethod": (_coerce_text, "Unknown"),
    "confidence": (_coerce_confidence, "low"),
}


def coerce_fields(data: dict) -> dict:
    """Apply the coercion table to every declared field. Never raises."""
    result = {}
    for name in RECEIPT_FIELD_NAMES:
        coercer, default = FIELD_RULES[name]
        raw_value = data.get(name)
        value = coercer(raw_value)
        if value is None:
            value = default() if callable(default) else default
            if raw_value is not None:
                logger.warning("Field '%s' had unusable value %r; using default %r", name, raw_value, value)
            else:
                logger.debug("Field '%s' missing; using default %r", name, value)
        result[name] = value
    return result


# -----------------------------------------------------------
# Response normalization
# -----------------------------------------------------------

def extract_json_object(text: str) -> dict:
    """
    Pull the JSON object out of free-form model text.

    Only the substring from the first '{' to the last '}' is parsed when one
    exists, which strips prose and markdown fences; otherwise the whole text is
    tried. Raises UnparseableResponse with the raw text attached.
    """
    text = text or ""
    match = _JSON_OBJECT_RE.search(text)
    candidate = match.group(0) if match else text

    try:
        data = json.loads(candidate)
    except (ValueError, RecursionError) as exc:
        logger.error("Failed to parse model response: %s | raw=%r", exc, text[:500])
        raise UnparseableResponse(text)

    if not isinstance(data, dict):
        logger.error("Model response is not a JSON object: %r", text[:500])
        raise UnparseableResponse(text, "Model response is not a JSON object")

    return data


def normalize_response(text: str) -> ParsedReceipt:
    """Model text -> fully populated ParsedReceipt, or UnparseableResponse."""
    data = extract_json_object(text)
    return ParsedReceipt.model_validate(coerce_fields(data))


def build_expense(parsed: ParsedReceipt, receipt_url: str = "") -> Expense:
    """Lift normalized fields to a canonical Expense with a fresh id and timestamp."""
    return Expense(
        **parsed.model_dump(),
        id=generate_id(),
        receipt_url=receipt_url,
        created_at=utc_now_iso(),
    )


# -----------------------------------------------------------
# Parser Agent
# -----------------------------------------------------------

def parse_receipt(
    raw: RawReceipt,
    llm_client,
    prompt: str = RECEIPT_PROMPT,
) -> ParsedReceipt:
    """
    Encode a receipt image, send it to the extraction model once, and
    normalize the reply. Extraction failures propagate unchanged.
    """
    logger.info("Initiating receipt parsing for %s.", raw.file_name or "receipt")

    try:
        if not raw.content:
            logger.error("Attempted to parse an empty receipt image.")
            raise ValueError("Empty receipt image provided")

        payload = encode_receipt(raw)
        response = llm_client.extract_receipt(payload, prompt)

        logger.debug(f"LLM Response received. Provider: {response.provider}")

        parsed = normalize_response(response.content)
        logger.info(f"Parsed receipt: {parsed.vendor} {parsed.amount:.2f} {parsed.currency} ({parsed.confidence})")
        return parsed

    except ExtractionError:
        raise
    except Exception as exc:
        logger.error(f"Receipt parsing failed: {str(exc)}", exc_info=True)
        raise CustomException(exc, sys)
