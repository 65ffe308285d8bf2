"""Compliance configuration loader with Pydantic v2 validation.

Loads a ``compliance.yaml`` file (or ``COMPLIANCE_*`` environment variables)
into a typed :class:`ComplianceConfig`.  Classification rules and retention
overrides are ordered lists of structured records, so a config dumped with
:meth:`ConfigLoader.dump` loads back unchanged.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load_string("batch_size: 50\\nhipaa_enabled: false")
>>> config.batch_size, config.hipaa_enabled
(50, False)
"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from aumos_chunk_compliance.detection.classifier import (
    DEFAULT_RETENTION_PRIORITY,
    DEFAULT_RULES,
    ClassificationRule,
    RetentionOverride,
    SensitivityLevel,
)
from aumos_chunk_compliance.errors import ConfigurationError


class ClassificationRuleConfig(BaseModel):
    """One classification rule as it appears in configuration."""

    name: str
    keywords: list[str] = Field(min_length=1)
    level: SensitivityLevel
    categories: list[str] = Field(default_factory=list)
    regulations: list[str] = Field(default_factory=list)

    @field_validator("keywords")
    @classmethod
    def lowercase_keywords(cls, values: list[str]) -> list[str]:
        return [v.lower() for v in values]

    def to_rule(self) -> ClassificationRule:
        return ClassificationRule(
            name=self.name,
            keywords=tuple(self.keywords),
            level=self.level,
            categories=tuple(self.categories),
            regulations=tuple(self.regulations),
        )


class RetentionOverrideConfig(BaseModel):
    """Retention override for one data category."""

    category: str
    retention_days: int = Field(ge=1)

    def to_override(self) -> RetentionOverride:
        return RetentionOverride(category=self.category, retention_days=self.retention_days)


def _default_rule_configs() -> list[ClassificationRuleConfig]:
    return [
        ClassificationRuleConfig(
            name=rule.name,
            keywords=list(rule.keywords),
            level=rule.level,
            categories=list(rule.categories),
            regulations=list(rule.regulations),
        )
        for rule in DEFAULT_RULES
    ]


def _default_retention_configs() -> list[RetentionOverrideConfig]:
    return [
        RetentionOverrideConfig(category=o.category, retention_days=o.retention_days)
        for o in DEFAULT_RETENTION_PRIORITY
    ]


class ComplianceConfig(BaseModel):
    """Top-level compliance scanning configuration.

    All fields are optional; unset fields take the service defaults.
    """

    model_config = {"extra": "ignore"}

    enabled: bool = Field(default=True)
    gdpr_enabled: bool = Field(default=True)
    hipaa_enabled: bool = Field(default=True)
    pii_detection_enabled: bool = Field(default=True)
    data_classification_enabled: bool = Field(default=True)
    batch_size: int = Field(default=20, ge=1)
    scan_interval: float = Field(default=60.0, gt=0)
    max_retry_attempts: int = Field(default=3, ge=1)
    retry_backoff_seconds: float = Field(default=1.0, ge=0)
    retention_days: int = Field(default=365, ge=1)
    stop_grace_seconds: float = Field(default=30.0, ge=0)
    classification_rules: list[ClassificationRuleConfig] = Field(default_factory=_default_rule_configs)
    retention_priority: list[RetentionOverrideConfig] = Field(default_factory=_default_retention_configs)

    def rules(self) -> list[ClassificationRule]:
        return [rule.to_rule() for rule in self.classification_rules]

    def retention_overrides(self) -> list[RetentionOverride]:
        return [override.to_override() for override in self.retention_priority]

    def regulations_checked(self) -> list[str]:
        checked: list[str] = []
        if self.gdpr_enabled:
            checked.append("GDPR")
        if self.hipaa_enabled:
            checked.append("HIPAA")
        return checked


# Environment variable -> config field.
ENV_VARIABLES: dict[str, str] = {
    "COMPLIANCE_ENABLED": "enabled",
    "COMPLIANCE_GDPR_ENABLED": "gdpr_enabled",
    "COMPLIANCE_HIPAA_ENABLED": "hipaa_enabled",
    "COMPLIANCE_PII_DETECTION_ENABLED": "pii_detection_enabled",
    "COMPLIANCE_DATA_CLASSIFICATION_ENABLED": "data_classification_enabled",
    "COMPLIANCE_BATCH_SIZE": "batch_size",
    "COMPLIANCE_SCAN_INTERVAL": "scan_interval",
    "COMPLIANCE_MAX_RETRY_ATTEMPTS": "max_retry_attempts",
    "COMPLIANCE_RETENTION_DAYS": "retention_days",
}


class ConfigLoader:
    """Loads and validates compliance configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("compliance.yaml"))
    """

    def load(self, config_path: Path) -> ComplianceConfig:
        """Load and validate a compliance YAML file.

        Parameters
        ----------
        config_path:
            Path to the ``compliance.yaml`` file.

        Returns
        -------
        ComplianceConfig
            Validated configuration object.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ConfigurationError:
            When the file is not valid YAML or fails validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Compliance config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            return self.load_string(fh.read())

    def load_string(self, yaml_content: str) -> ComplianceConfig:
        """Load and validate a YAML string directly."""
        try:
            raw = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid compliance YAML: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigurationError("Compliance config must be a mapping at the top level.")
        return self._validate(raw)

    def from_env(self, environ: Mapping[str, str]) -> ComplianceConfig:
        """Build a configuration from ``COMPLIANCE_*`` environment variables.

        Unset variables keep their defaults.
        """
        raw = {field: environ[name] for name, field in ENV_VARIABLES.items() if name in environ}
        return self._validate(raw)

    def dump(self, config: ComplianceConfig) -> str:
        """Serialise a configuration to YAML, preserving rule order."""
        return yaml.safe_dump(
            config.model_dump(mode="json"),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def defaults(self) -> ComplianceConfig:
        """Return a default configuration with all defaults applied."""
        return ComplianceConfig()

    @staticmethod
    def _validate(raw: dict[str, object]) -> ComplianceConfig:
        try:
            return ComplianceConfig.model_validate(raw)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid compliance configuration: {exc}") from exc
