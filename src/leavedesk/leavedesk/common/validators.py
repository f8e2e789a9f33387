from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

PHONE_RE = re.compile(r"^\d{10}$")
PINCODE_RE = re.compile(r"^\d{6}$")
AADHAAR_RE = re.compile(r"^\d{12}$")
PAN_RE = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")


def _as_text(value: Any) -> str:
    # JSON bodies may carry digits as numbers.
    return "" if value is None else str(value).strip()


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def validate_phone(phone: Any) -> Optional[str]:
    phone = _as_text(phone)
    if not phone:
        return "Phone number is required"
    if not PHONE_RE.match(phone):
        return "Phone number must be exactly 10 digits"
    return None


def validate_pincode(pincode: Any) -> Optional[str]:
    pincode = _as_text(pincode)
    if not pincode:
        return "Pincode is required"
    if not PINCODE_RE.match(pincode):
        return "Pincode must be exactly 6 digits"
    return None


def validate_aadhaar(aadhaar: Any) -> Optional[str]:
    aadhaar = _as_text(aadhaar)
    if not aadhaar:
        return None
    if not AADHAAR_RE.match(aadhaar):
        return "Aadhaar number must be exactly 12 digits"
    return None


def validate_pan(pan: Any) -> Optional[str]:
    pan = _as_text(pan)
    if not pan:
        return None
    if not PAN_RE.match(pan):
        return "Invalid PAN number format (e.g., ABCDE1234F)"
    return None


def identity_errors(
    *,
    phone: Any = None,
    pincode: Any = None,
    aadhaar: Any = None,
    pan: Any = None,
) -> list[str]:
    """Collect errors for the identity fields that were supplied.

    Phone and pincode are only checked when present, matching the profile forms
    where they are optional on partial updates.
    """

    errors: list[str] = []
    if phone is not None and phone != "":
        errors.append(validate_phone(phone))
    if pincode is not None and pincode != "":
        errors.append(validate_pincode(pincode))
    errors.append(validate_aadhaar(aadhaar))
    errors.append(validate_pan(pan))
    return [e for e in errors if e]


def raise_first(errors: list[str]) -> None:
    if errors:
        raise ValidationError(errors[0])
