"""Tenant discovery for background compliance passes."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable


class TenantProvider(ABC):
    """Supplies the tenants scanned on each background cycle."""

    @abstractmethod
    def active_tenants(self) -> list[str]:
        """Return the identifiers of tenants to scan this cycle."""


class StaticTenantProvider(TenantProvider):
    """Fixed tenant list, de-duplicated in the given order."""

    def __init__(self, tenant_ids: Iterable[str]) -> None:
        self._tenant_ids: list[str] = list(dict.fromkeys(tenant_ids))

    def active_tenants(self) -> list[str]:
        return list(self._tenant_ids)
