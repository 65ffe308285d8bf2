"""Rule-based data classifier for chunk content.

Maps content to a sensitivity level, a category set, the regulations that
apply, and a minimum retention period.

Sensitivity levels (ordered low to high):
    PUBLIC < INTERNAL < CONFIDENTIAL < RESTRICTED

Rules are evaluated in list order, but the outcome does not depend on that
order: the level only ever rises to the highest matching rule, and retention
is resolved afterwards from an explicit category priority list.

Example
-------
>>> classifier = DataClassifier()
>>> result = classifier.classify("Patient diagnosis attached")
>>> result.level, result.retention_days
(<SensitivityLevel.RESTRICTED: 'restricted'>, 2555)
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum


class SensitivityLevel(str, Enum):
    """Ordered sensitivity classification levels."""

    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    RESTRICTED = "restricted"

    @property
    def rank(self) -> int:
        return list(SensitivityLevel).index(self)

    def __ge__(self, other: "SensitivityLevel") -> bool:
        return self.rank >= other.rank

    def __gt__(self, other: "SensitivityLevel") -> bool:
        return self.rank > other.rank

    def __le__(self, other: "SensitivityLevel") -> bool:
        return self.rank <= other.rank

    def __lt__(self, other: "SensitivityLevel") -> bool:
        return self.rank < other.rank


@dataclass(frozen=True)
class ClassificationRule:
    """A keyword trigger together with the classification it implies.

    Attributes
    ----------
    name:
        Rule name, conventionally the primary category it detects.
    keywords:
        Lower-case substrings; any one of them triggers the rule.
    level:
        Sensitivity level the rule raises the result to.
    categories:
        Data categories added when the rule matches.
    regulations:
        Regulations added when the rule matches.
    """

    name: str
    keywords: tuple[str, ...]
    level: SensitivityLevel
    categories: tuple[str, ...] = ()
    regulations: tuple[str, ...] = ()

    def matches(self, lower_content: str) -> bool:
        return any(keyword in lower_content for keyword in self.keywords)


@dataclass(frozen=True)
class RetentionOverride:
    """Minimum retention imposed when a category is present."""

    category: str
    retention_days: int


@dataclass(frozen=True)
class DataClassification:
    """Classification outcome for a single piece of content."""

    level: SensitivityLevel = SensitivityLevel.PUBLIC
    categories: tuple[str, ...] = field(default_factory=tuple)
    regulations: tuple[str, ...] = field(default_factory=tuple)
    retention_days: int = 365

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level.value,
            "categories": list(self.categories),
            "regulations": list(self.regulations),
            "retention_days": self.retention_days,
        }


DEFAULT_RETENTION_DAYS = 365

DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="financial",
        keywords=("credit card", "bank account", "payment", "invoice"),
        level=SensitivityLevel.CONFIDENTIAL,
        categories=("financial",),
        regulations=("PCI-DSS", "SOX"),
    ),
    ClassificationRule(
        name="health",
        keywords=("medical", "health", "patient", "diagnosis"),
        level=SensitivityLevel.RESTRICTED,
        categories=("health", "personal"),
        regulations=("HIPAA", "GDPR"),
    ),
    ClassificationRule(
        name="personal",
        keywords=("name", "address", "email", "phone"),
        level=SensitivityLevel.INTERNAL,
        categories=("personal",),
        regulations=("GDPR", "CCPA"),
    ),
)

# Highest priority first.
DEFAULT_RETENTION_PRIORITY: tuple[RetentionOverride, ...] = (
    RetentionOverride(category="health", retention_days=2555),
    RetentionOverride(category="financial", retention_days=2190),
)

# ---------------------------------------------------------------------------
# Source path patterns
# ---------------------------------------------------------------------------
_PATH_PATTERNS: tuple[tuple[SensitivityLevel, re.Pattern[str]], ...] = (
    (
        SensitivityLevel.RESTRICTED,
        re.compile(r"(?i)(secret|restricted|credentials|vault|\.pem|\.key|\.p12|\.pfx|id_rsa|id_ed25519)"),
    ),
    (
        SensitivityLevel.CONFIDENTIAL,
        re.compile(r"(?i)(confidential|proprietary|sensitive|hipaa|phi|pii|gdpr|classified)"),
    ),
    (
        SensitivityLevel.INTERNAL,
        re.compile(r"(?i)(internal|corp|employee|payroll|finance)"),
    ),
)

_PATH_METADATA_KEYS: tuple[str, ...] = ("source_path", "file_path")


class DataClassifier:
    """Classifies chunk content with an ordered rule list.

    Parameters
    ----------
    rules:
        Classification rules.  Defaults to :data:`DEFAULT_RULES`.  Keywords
        are lower-cased here, as content is matched lower-cased.
    retention_priority:
        Category retention overrides, highest priority first.  The first
        override whose category is present decides the retention period.
    default_retention_days:
        Retention applied when no override category is present.
    """

    def __init__(
        self,
        rules: Iterable[ClassificationRule] | None = None,
        retention_priority: Iterable[RetentionOverride] | None = None,
        default_retention_days: int = DEFAULT_RETENTION_DAYS,
    ) -> None:
        self._rules: tuple[ClassificationRule, ...] = tuple(
            replace(rule, keywords=tuple(kw.lower() for kw in rule.keywords))
            for rule in (rules if rules is not None else DEFAULT_RULES)
        )
        self._retention_priority: tuple[RetentionOverride, ...] = tuple(
            retention_priority if retention_priority is not None else DEFAULT_RETENTION_PRIORITY
        )
        self._default_retention_days = default_retention_days

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def classify(
        self,
        content: str,
        metadata: Mapping[str, object] | None = None,
    ) -> DataClassification:
        """Classify content, optionally using chunk metadata.

        Parameters
        ----------
        content:
            Text content to analyse.
        metadata:
            Free-form chunk metadata.  A ``source_path`` or ``file_path``
            entry is matched against sensitive path patterns and can raise
            (never lower) the level.

        Returns
        -------
        DataClassification
            Highest matching level, de-duplicated categories and regulations
            in first-seen order, and the resolved retention period.
        """
        lower_content = content.lower()
        level = SensitivityLevel.PUBLIC
        categories: list[str] = []
        regulations: list[str] = []

        for rule in self._rules:
            if not rule.matches(lower_content):
                continue
            if rule.level > level:
                level = rule.level
            categories.extend(rule.categories)
            regulations.extend(rule.regulations)

        path_level = self.classify_path(_source_path(metadata))
        if path_level > level:
            level = path_level

        unique_categories = tuple(dict.fromkeys(categories))
        return DataClassification(
            level=level,
            categories=unique_categories,
            regulations=tuple(dict.fromkeys(regulations)),
            retention_days=self.resolve_retention(unique_categories),
        )

    def classify_path(self, path: str | None) -> SensitivityLevel:
        """Classify sensitivity from a source path alone."""
        if not path:
            return SensitivityLevel.PUBLIC
        for level, pattern in _PATH_PATTERNS:
            if pattern.search(path):
                return level
        return SensitivityLevel.PUBLIC

    def resolve_retention(self, categories: Iterable[str]) -> int:
        """Return the retention period for a set of categories."""
        present = set(categories)
        for override in self._retention_priority:
            if override.category in present:
                return override.retention_days
        return self._default_retention_days

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules


def _source_path(metadata: Mapping[str, object] | None) -> str | None:
    if not metadata:
        return None
    for key in _PATH_METADATA_KEYS:
        value = metadata.get(key)
        if isinstance(value, str) and value:
            return value
    return None
