"""Unit tests for the error codes the API emits."""
import pytest

from creditdesk.main import VALIDATION_CODES, error_code_for
from creditdesk.schemas.error import REMEDIATION_HINTS, ErrorCode

DECLARED = {value for name, value in vars(ErrorCode).items() if name.isupper()}


@pytest.mark.parametrize(
    "error, expected",
    [
        ({"loc": ("body", "email"), "type": "value_error"}, ErrorCode.INVALID_EMAIL),
        ({"loc": ("body", "mac_address"), "type": "value_error"}, ErrorCode.INVALID_MAC_ADDRESS),
        ({"loc": ("body", "amount_paid"), "type": "greater_than"}, ErrorCode.INVALID_AMOUNT),
        ({"loc": ("body", "start_date"), "type": "date_parsing"}, ErrorCode.INVALID_DATE),
        ({"loc": ("body", "name"), "type": "missing"}, ErrorCode.MISSING_REQUIRED_FIELD),
        ({"loc": ("body", "name"), "type": "string_too_long"}, ErrorCode.VALIDATION_ERROR),
    ],
)
def test_error_code_for(error: dict, expected: str) -> None:
    assert error_code_for(error) == expected


def test_every_declared_code_is_emitted() -> None:
    """Test that ErrorCode holds only codes some response can carry."""
    emitted = set(VALIDATION_CODES.values()) | {
        ErrorCode.INVALID_EMAIL,
        ErrorCode.INVALID_MAC_ADDRESS,
        ErrorCode.DATABASE_ERROR,
        ErrorCode.INTERNAL_ERROR,
    }

    assert DECLARED == emitted


def test_remediation_hints_use_declared_codes() -> None:
    assert set(REMEDIATION_HINTS) <= DECLARED
