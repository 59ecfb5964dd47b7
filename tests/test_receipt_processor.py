import threading

import pytest
from unittest.mock import MagicMock

from expense_tracker.components.receipt_processor import process_receipt, process_receipts
from expense_tracker.exception import TransportFailure, UnparseableResponse
from expense_tracker.models import Expense, LLMResponse, RawReceipt


def _reply(text):
    return LLMResponse(content=text, model_name="gpt-4o-mini", provider="OpenAIClient")


@pytest.fixture
def mock_llm_client():
    """Replies per receipt, keyed on the encoded image payload."""
    replies = {
        "good": _reply('{"vendor": "Acme", "amount": 10, "category": "Supplies", "confidence": "high"}'),
        "prose": _reply("Sorry, the image is too blurry."),
        "fenced": _reply('```json\n{"vendor": "Cafe", "amount": "4.20"}\n```'),
    }
    client = MagicMock()

    def extract_receipt(payload, prompt):
        key = payload.decode().decode()
        if key == "down":
            raise TransportFailure("service unavailable")
        return replies[key]

    client.extract_receipt.side_effect = extract_receipt
    return client


def raw(name):
    return RawReceipt(file_name=f"{name}.jpg", content=name.encode(), content_type="image/jpeg")


def test_process_receipt_builds_expense(mock_llm_client):
    expense = process_receipt(raw("good"), mock_llm_client)

    assert isinstance(expense, Expense)
    assert expense.vendor == "Acme"
    assert expense.amount == 10
    assert expense.receipt_url.startswith("data:image/jpeg;base64,")
    assert expense.id and expense.created_at


def test_process_receipt_raises_for_unparseable(mock_llm_client):
    with pytest.raises(UnparseableResponse):
        process_receipt(raw("prose"), mock_llm_client)


def test_batch_isolates_failures(mock_llm_client):
    outcomes = process_receipts(
        [raw("good"), raw("down"), raw("prose"), raw("fenced")],
        mock_llm_client,
        max_workers=4,
    )

    assert [o.file_name for o in outcomes] == ["good.jpg", "down.jpg", "prose.jpg", "fenced.jpg"]
    assert [o.status for o in outcomes] == ["done", "error", "error", "done"]
    assert outcomes[0].expense.vendor == "Acme"
    assert outcomes[3].expense.amount == 4.2
    assert "service unavailable" in outcomes[1].error
    assert "Failed to parse receipt data" in outcomes[2].error
    assert outcomes[2].raw_text == "Sorry, the image is too blurry."
    assert outcomes[1].raw_text is None
    assert outcomes[1].expense is None
    assert mock_llm_client.extract_receipt.call_count == 4


def test_batch_runs_uploads_concurrently():
    """Two uploads are in flight at the same time."""
    barrier = threading.Barrier(2, timeout=5)
    client = MagicMock()

    def extract_receipt(payload, prompt):
        barrier.wait()
        return _reply('{"vendor": "Acme"}')

    client.extract_receipt.side_effect = extract_receipt

    outcomes = process_receipts([raw("a"), raw("b")], client, max_workers=2)

    assert all(o.success for o in outcomes)


def test_batch_with_no_uploads():
    assert process_receipts([], MagicMock()) == []
