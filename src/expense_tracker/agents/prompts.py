"""
Prompt templates for the receipt extraction model.

The output fields are declared once in RECEIPT_FIELDS; the prompt is rendered
from that table and the parser normalizes against the same field names, so
rewording the instructions never changes the parsed shape.
"""

from expense_tracker.models import CATEGORIES, CONFIDENCE_LEVELS

RECEIPT_PROMPT_VERSION = "v1"

# (field name, instruction shown to the model)
RECEIPT_FIELDS = [
    ("date", '"YYYY-MM-DD format, use today\'s date if not visible"'),
    ("vendor", '"Business/merchant name"'),
    ("amount", "number (total amount as a decimal number, no currency symbol)"),
    ("currency", '"USD"'),
    ("category", f'"One of: {", ".join(CATEGORIES)}"'),
    ("paymentMethod", '"Credit Card, Debit, Cash, or Unknown"'),
    ("confidence", f'"{", ".join(CONFIDENCE_LEVELS[:-1])}, or {CONFIDENCE_LEVELS[-1]} based on how clearly you could read the receipt"'),
]

RECEIPT_FIELD_NAMES = [name for name, _ in RECEIPT_FIELDS]

RECEIPT_PROMPT_TEMPLATE = """Analyze this receipt image and extract the following information. Return ONLY a valid JSON object with no additional text or markdown formatting.

{schema}

Important:
- For amount, extract the TOTAL amount including tax
- If you can't read something clearly, make your best guess and set confidence to "low" or "medium"
- Return ONLY the JSON object, no other text"""


def render_schema(fields=RECEIPT_FIELDS) -> str:
    lines = [f'  "{name}": {instruction}' for name, instruction in fields]
    return "{\n" + ",\n".join(lines) + "\n}"


def build_receipt_prompt() -> str:
    return RECEIPT_PROMPT_TEMPLATE.format(schema=render_schema())


RECEIPT_PROMPT = build_receipt_prompt()
