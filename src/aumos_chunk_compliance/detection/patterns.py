"""Built-in PII pattern families.

Each family pairs a compiled regular expression with a masking rule and a
structural confidence heuristic.  The table order of :data:`BUILTIN_PATTERNS`
is the tie-break order when two families match at the same offset.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_MASK = "***"
DEFAULT_CONFIDENCE = 0.70


@dataclass(frozen=True)
class PatternFamily:
    """A named PII pattern with its masking and scoring rules.

    Attributes
    ----------
    label:
        PII type tag emitted on every match (e.g. ``"email"``).
    pattern:
        Compiled regex.  Matches are found with ``finditer`` so occurrences
        of one family never overlap each other.
    mask:
        Callable turning the raw matched value into a masked representation.
    confidence:
        Callable scoring the raw matched value in ``[0, 1]``.
    """

    label: str
    pattern: re.Pattern[str]
    mask: Callable[[str], str]
    confidence: Callable[[str], float]


def _digits(value: str) -> str:
    return "".join(ch for ch in value if ch.isdigit())


def _luhn_valid(digits: str) -> bool:
    total = 0
    for index, char in enumerate(reversed(digits)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def default_mask(value: str) -> str:
    """Mask used for families without a type-specific rule."""
    return DEFAULT_MASK


def default_confidence(value: str) -> float:
    """Confidence used for families without a type-specific heuristic."""
    return DEFAULT_CONFIDENCE


# ---------------------------------------------------------------------------
# Masking rules
# ---------------------------------------------------------------------------

def mask_email(value: str) -> str:
    local, sep, domain = value.partition("@")
    if not sep or not local:
        return DEFAULT_MASK
    return f"{local[:1]}***@{domain}"


def mask_ssn(value: str) -> str:
    return "***-**-" + _digits(value)[-4:]


def mask_phone(value: str) -> str:
    return "***-***-" + _digits(value)[-4:]


def mask_credit_card(value: str) -> str:
    return "****-****-****-" + _digits(value)[-4:]


def mask_ip_address(value: str) -> str:
    first_octet = value.split(".", 1)[0]
    return f"{first_octet}.***.***.***"


# ---------------------------------------------------------------------------
# Confidence heuristics
# ---------------------------------------------------------------------------

def email_confidence(value: str) -> float:
    _, _, domain = value.partition("@")
    if "." in domain:
        return 0.95
    return DEFAULT_CONFIDENCE


def ssn_confidence(value: str) -> float:
    if len(_digits(value)) == 9:
        return 0.90
    return DEFAULT_CONFIDENCE


def phone_confidence(value: str) -> float:
    if len(_digits(value)) == 10:
        return 0.85
    return DEFAULT_CONFIDENCE


def credit_card_confidence(value: str) -> float:
    digits = _digits(value)
    if len(digits) != 16:
        return DEFAULT_CONFIDENCE
    return 0.95 if _luhn_valid(digits) else 0.75


def ip_address_confidence(value: str) -> float:
    octets = value.split(".")
    if len(octets) == 4 and all(int(octet) <= 255 for octet in octets):
        return 0.80
    return 0.30


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------

EMAIL = PatternFamily(
    label="email",
    pattern=re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}"),
    mask=mask_email,
    confidence=email_confidence,
)

# US Social Security Number, separators optional.
SSN = PatternFamily(
    label="ssn",
    pattern=re.compile(r"\b\d{3}-?\d{2}-?\d{4}\b", re.ASCII),
    mask=mask_ssn,
    confidence=ssn_confidence,
)

PHONE = PatternFamily(
    label="phone",
    pattern=re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b", re.ASCII),
    mask=mask_phone,
    confidence=phone_confidence,
)

CREDIT_CARD = PatternFamily(
    label="credit_card",
    pattern=re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b", re.ASCII),
    mask=mask_credit_card,
    confidence=credit_card_confidence,
)

IP_ADDRESS = PatternFamily(
    label="ip_address",
    pattern=re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b", re.ASCII),
    mask=mask_ip_address,
    confidence=ip_address_confidence,
)

PASSPORT = PatternFamily(
    label="passport",
    pattern=re.compile(r"\b[A-Z]{1,2}\d{6,9}\b", re.ASCII),
    mask=default_mask,
    confidence=default_confidence,
)

DRIVER_LICENSE = PatternFamily(
    label="driver_license",
    pattern=re.compile(r"\b[A-Z]{1,2}\d{6,8}\b", re.ASCII),
    mask=default_mask,
    confidence=default_confidence,
)

BUILTIN_PATTERNS: tuple[PatternFamily, ...] = (
    EMAIL,
    SSN,
    PHONE,
    CREDIT_CARD,
    IP_ADDRESS,
    PASSPORT,
    DRIVER_LICENSE,
)
