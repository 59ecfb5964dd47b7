from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from expense_tracker.logger import get_logger
from expense_tracker.exception import UnparseableResponse
from expense_tracker.agents.parser import build_expense, parse_receipt
from expense_tracker.components.image_encoder import build_receipt_url
from expense_tracker.models import Expense, RawReceipt, UploadOutcome
from expense_tracker.utils.load_config import load_config_file

logger = get_logger(__name__)

DEFAULT_MAX_WORKERS = 4


def process_receipt(raw: RawReceipt, llm_client) -> Expense:
    """Encode -> request -> normalize -> Expense for one image. Errors propagate."""
    parsed = parse_receipt(raw, llm_client)
    return build_expense(parsed, receipt_url=build_receipt_url(raw))


def _process_one(raw: RawReceipt, llm_client) -> UploadOutcome:
    try:
        expense = process_receipt(raw, llm_client)
        return UploadOutcome(file_name=raw.file_name, status="done", expense=expense)
    except Exception as e:
        # Failures stay with their own upload
        logger.error(f"Pipeline failed for {raw.file_name}: {e}")
        return UploadOutcome(
            file_name=raw.file_name,
            status="error",
            error=str(e),
            raw_text=e.raw_text if isinstance(e, UnparseableResponse) else None,
        )


def process_receipts(
    raws: Sequence[RawReceipt],
    llm_client,
    max_workers: Optional[int] = None,
) -> List[UploadOutcome]:
    """
    Process several uploads concurrently.

    Each receipt runs its own sequential pipeline; results come back in input
    order, one UploadOutcome per receipt.
    """
    if not raws:
        return []

    if max_workers is None:
        max_workers = load_config_file().get("uploads", {}).get("max_workers", DEFAULT_MAX_WORKERS)
    max_workers = max(1, min(max_workers, len(raws)))

    logger.info(f"Processing {len(raws)} receipts with {max_workers} workers")
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        outcomes = list(pool.map(lambda raw: _process_one(raw, llm_client), raws))

    failed = sum(1 for o in outcomes if not o.success)
    if failed:
        logger.warning(f"{failed} of {len(outcomes)} receipts failed to parse")
    return outcomes
