"""Keyword scanners that emit regulation flags.

A :class:`RegulationScanner` holds ordered keyword groups.  Each group maps
to one flag, and a group contributes its flag at most once no matter how
many of its keywords appear: flags mark presence, not counts.

Example
-------
>>> hipaa_scanner().scan("Patient diagnosis pending lab results")
['PHI_DETECTED', 'MEDICAL_DATA']
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeywordGroup:
    """A flag together with the keywords that raise it."""

    flag: str
    keywords: tuple[str, ...]


class RegulationScanner:
    """Case-insensitive keyword scanner for one regulation.

    Parameters
    ----------
    regulation:
        Regulation name used for logging and reports (e.g. ``"GDPR"``).
    groups:
        Keyword groups evaluated in order.  Keywords are lower-cased here so
        mixed-case entries such as ``"MRI"`` still match.
    """

    def __init__(self, regulation: str, groups: Iterable[KeywordGroup]) -> None:
        self._regulation = regulation
        self._groups: tuple[KeywordGroup, ...] = tuple(
            KeywordGroup(flag=g.flag, keywords=tuple(kw.lower() for kw in g.keywords))
            for g in groups
        )

    def scan(self, text: str) -> list[str]:
        """Return the flags whose keyword groups occur in ``text``.

        Parameters
        ----------
        text:
            Content to scan.

        Returns
        -------
        list[str]
            Flags in group order, each at most once.
        """
        lower_text = text.lower()
        flags: list[str] = []
        for group in self._groups:
            if any(keyword in lower_text for keyword in group.keywords):
                flags.append(group.flag)
        return flags

    @property
    def regulation(self) -> str:
        return self._regulation

    @property
    def flags(self) -> list[str]:
        """All flags this scanner can emit, in group order."""
        return [group.flag for group in self._groups]


GDPR_GROUPS: tuple[KeywordGroup, ...] = (
    KeywordGroup(
        flag="GDPR_PERSONAL_DATA",
        keywords=(
            "name", "address", "email", "phone", "birth", "nationality",
            "identification", "location", "online identifier", "ip address",
        ),
    ),
    KeywordGroup(
        flag="GDPR_SENSITIVE_DATA",
        keywords=(
            "racial", "ethnic", "political", "religious", "trade union",
            "genetic", "biometric", "health", "sex life", "sexual orientation",
        ),
    ),
)

HIPAA_GROUPS: tuple[KeywordGroup, ...] = (
    KeywordGroup(
        flag="PHI_DETECTED",
        keywords=(
            "patient", "medical", "health", "diagnosis", "treatment",
            "medication", "prescription", "doctor", "physician", "hospital",
        ),
    ),
    KeywordGroup(
        flag="MEDICAL_DATA",
        keywords=(
            "blood pressure", "diabetes", "cancer", "surgery", "therapy",
            "MRI", "CT scan", "x-ray", "lab results", "medical record", "diagnosis",
        ),
    ),
    KeywordGroup(
        flag="HIPAA_IDENTIFIER",
        keywords=(
            "medical record number", "health plan", "account number",
            "certificate number", "device identifier", "biometric identifier",
        ),
    ),
)


def gdpr_scanner() -> RegulationScanner:
    """Scanner for general personal data and GDPR special categories."""
    return RegulationScanner("GDPR", GDPR_GROUPS)


def hipaa_scanner() -> RegulationScanner:
    """Scanner for protected health information and health identifiers."""
    return RegulationScanner("HIPAA", HIPAA_GROUPS)
