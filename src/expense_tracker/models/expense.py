from typing import Any, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field

ExpenseCategory = Literal["Travel", "Meals", "Supplies", "Mileage", "Other"]
ConfidenceLevel = Literal["high", "medium", "low"]

CATEGORIES = list(get_args(ExpenseCategory))
CONFIDENCE_LEVELS = list(get_args(ConfidenceLevel))


class ParsedReceipt(BaseModel):
    """The seven fields the extraction model is asked for, after normalization."""
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(..., description="Receipt date in YYYY-MM-DD format")
    vendor: str = Field(..., description="Business or merchant name")
    amount: float = Field(..., ge=0, description="Total amount including tax")
    currency: str = Field(..., description="Currency code, e.g. USD")
    category: ExpenseCategory
    payment_method: str = Field(..., alias="paymentMethod")
    confidence: ConfidenceLevel


class Expense(ParsedReceipt):
    """Canonical, persisted expense record."""

    id: str
    receipt_url: str = Field("", alias="receiptUrl")
    notes: Optional[str] = None
    project_code: Optional[str] = Field(None, alias="projectCode")
    group_id: Optional[str] = Field(None, alias="groupId")
    created_at: str = Field(..., alias="createdAt")

    def with_updates(self, **changes: Any) -> "Expense":
        """Return a validated copy with user edits applied. id and created_at never change."""
        frozen = {"id", "created_at", "createdAt"} & set(changes)
        if frozen:
            raise ValueError(f"Cannot modify immutable expense fields: {sorted(frozen)}")

        data = self.model_dump()
        data.update(changes)
        return Expense.model_validate(data)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


class ExpenseGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)
