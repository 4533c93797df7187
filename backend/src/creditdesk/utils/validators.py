"""Normalization helpers for customer and device identifiers."""
import re

_MAC_PATTERN = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$|^[0-9A-Fa-f]{12}$")
_PHONE_PATTERN = re.compile(r"^\+?[\s\-()]*(\d[\s\-()]*){6,20}$")


def is_valid_mac_address(mac_address: str) -> bool:
    """
    Check a MAC address in XX:XX:XX:XX:XX:XX, XX-XX-XX-XX-XX-XX or XXXXXXXXXXXX form.

    Empty values are accepted since the field is optional.
    """
    if not mac_address or not mac_address.strip():
        return True
    return bool(_MAC_PATTERN.match(mac_address.strip()))


def normalize_mac_address(mac_address: str) -> str:
    """
    Normalize a MAC address to upper-case colon-separated form.

    Args:
        mac_address: Address in any supported form, or empty

    Returns:
        "AA:BB:CC:DD:EE:FF", or "" for empty input

    Raises:
        ValueError: If the address is not in a supported form
    """
    if not mac_address or not mac_address.strip():
        return ""
    if not is_valid_mac_address(mac_address):
        raise ValueError(
            "MAC address must be in format XX:XX:XX:XX:XX:XX, XX-XX-XX-XX-XX-XX, or XXXXXXXXXXXX"
        )
    cleaned = re.sub(r"[:-]", "", mac_address.strip()).upper()
    return ":".join(cleaned[i:i + 2] for i in range(0, 12, 2))


def is_valid_phone(phone: str) -> bool:
    """Loose international phone check (6-20 digits); empty is accepted."""
    if not phone or not phone.strip():
        return True
    return bool(_PHONE_PATTERN.match(phone.strip()))


def normalize_phone(phone: str) -> str:
    """Strip everything except digits and a leading plus sign."""
    if not phone:
        return ""
    return re.sub(r"[^\d+]", "", phone)


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address."""
    return email.strip().lower() if email else ""
