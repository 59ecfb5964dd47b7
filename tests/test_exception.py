import sys

import pytest

from expense_tracker.exception import CustomException, ExtractionError, NoTextResponse, TransportFailure, UnparseableResponse


def test_custom_exception_with_message():
    assert str(CustomException("boom")) == "boom"


def test_custom_exception_records_origin():
    try:
        raise ValueError("bad input")
    except ValueError as e:
        wrapped = CustomException(e, sys)

    assert "test_exception.py" in str(wrapped)
    assert "bad input" in str(wrapped)


@pytest.mark.parametrize("error", [
    TransportFailure("timeout"),
    NoTextResponse(),
    UnparseableResponse("raw"),
])
def test_extraction_errors_share_a_base(error):
    assert isinstance(error, ExtractionError)
    assert isinstance(error, CustomException)


def test_unparseable_response_keeps_raw_text():
    error = UnparseableResponse("Here you go: {oops")
    assert error.raw_text == "Here you go: {oops"
    assert str(error) == "Failed to parse receipt data"
