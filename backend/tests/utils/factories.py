"""Test data factories using Faker for generating realistic test data."""
from datetime import date, timedelta
from typing import Any

from faker import Faker

fake = Faker()


class CustomerFactory:
    """Factory for creating test customer data."""

    @staticmethod
    def create(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Create customer test data.

        Args:
            overrides: Optional field overrides

        Returns:
            dict: Customer data
        """
        data = {
            "name": fake.company(),
            "email": fake.unique.email().lower(),
            "phone": f"+1555{fake.random_number(digits=7, fix_len=True)}",
            "address": fake.address().replace("\n", ", ")[:500],
        }
        if overrides:
            data.update(overrides)
        return data


class VendorFactory:
    """Factory for creating test vendor data."""

    @staticmethod
    def create(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Create vendor test data.

        Args:
            overrides: Optional field overrides

        Returns:
            dict: Vendor data
        """
        data = {
            "name": f"{fake.company()} Credits",
            "contact_email": fake.company_email(),
            "contact_phone": fake.numerify("+44 20 #### ####"),
            "description": fake.sentence(),
        }
        if overrides:
            data.update(overrides)
        return data


class SubscriptionFactory:
    """Factory for creating test subscription payloads."""

    @staticmethod
    def create(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Create subscription test data without vendor credits.

        Args:
            overrides: Optional field overrides (customer_id is required by the API)

        Returns:
            dict: Subscription data with ISO date strings
        """
        start_date = fake.date_between(start_date="-60d", end_date="today")
        data = {
            "customer_id": None,
            "service_name": fake.random_element(["IPTV 12 months", "VPN 6 months", "Router install"]),
            "start_date": start_date.isoformat(),
            "expiration_date": (start_date + timedelta(days=365)).isoformat(),
            "amount_paid": float(fake.random_int(min=10, max=300)),
            "credits_used": 0,
            "classification": fake.random_element(["", "Streaming", "Networking"]),
            "notes": fake.sentence(),
        }
        if overrides:
            data.update(overrides)
        return data


class VendorTransactionFactory:
    """Factory for creating test credit purchase payloads."""

    @staticmethod
    def create(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Create credit purchase test data.

        Args:
            overrides: Optional field overrides (vendor_id is required by the API)

        Returns:
            dict: Purchase data
        """
        credits = fake.random_int(min=10, max=500)
        data = {
            "vendor_id": None,
            "service_name": "svcX",
            "credits": credits,
            "price_usd": round(credits * 2.5, 2),
            "purchase_date": date.today().isoformat(),
            "notes": fake.sentence(),
        }
        if overrides:
            data.update(overrides)
        return data
