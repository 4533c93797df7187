"""Unit tests for report period bounds and the open-ended expiration date."""
from datetime import date

import pytest

from creditdesk.services.report_service import period_bounds
from creditdesk.services.subscription_store import open_ended_expiration


def test_month_bounds() -> None:
    assert period_bounds(2026, 2) == (date(2026, 2, 1), date(2026, 3, 1))


def test_december_bounds() -> None:
    assert period_bounds(2026, 12) == (date(2026, 12, 1), date(2027, 1, 1))


def test_year_bounds() -> None:
    assert period_bounds(2026) == (date(2026, 1, 1), date(2027, 1, 1))


@pytest.mark.parametrize("month", [0, 13, -1])
def test_invalid_month(month: int) -> None:
    """Test that months outside 1-12 are rejected."""
    with pytest.raises(ValueError, match="Month must be between 1 and 12"):
        period_bounds(2026, month)


def test_open_ended_expiration_default() -> None:
    """Test the far-future date used for subscriptions without an end."""
    assert open_ended_expiration() == date(9999, 12, 31)
