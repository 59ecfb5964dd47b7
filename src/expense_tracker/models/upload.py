from typing import Literal, Optional

from pydantic import BaseModel

from expense_tracker.models.expense import Expense

UploadStatus = Literal["done", "error"]


class UploadOutcome(BaseModel):
    """Result of processing one uploaded receipt."""

    file_name: str
    status: UploadStatus
    expense: Optional[Expense] = None
    error: Optional[str] = None
    raw_text: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == "done"
