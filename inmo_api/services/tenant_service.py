"""Resolve the tenant serving a request from its public hostname."""

from __future__ import annotations

import logging
from typing import Any

from inmo_api.cache import CacheClient, tenant_domain_key
from inmo_api.db.models import Tenant
from inmo_api.db.repositories import TenantRepository
from inmo_api.errors import NotFoundError
from inmo_api.schemas.common import TenantConfig
from inmo_api.services.caching import CacheableService, cached
from inmo_api.services.content_cache import content_ttl, page_deserializer
from inmo_api.settings import get_settings

logger = logging.getLogger(__name__)

TENANT_NOT_FOUND = "Tenant not found"


def normalize_domain(host: str | None) -> str | None:
    """Lower-case ``host`` and drop any port; ``None`` for blank input."""

    if not host:
        return None
    domain = host.strip().lower().split(":", 1)[0]
    return domain or None


def tenant_config_from_row(tenant: Tenant) -> TenantConfig:
    settings: dict[str, Any] = tenant.configuracion or {}
    return TenantConfig(
        id=tenant.id,
        slug=tenant.slug,
        name=tenant.nombre,
        domain=tenant.dominio_personalizado,
        branding=settings.get("branding") or {},
        contact=settings.get("contact") or {},
        business_info=settings.get("info_negocio") or {},
    )


def _tenant_cache_key(service: "TenantService", domain: str | None) -> str | None:
    normalized = normalize_domain(domain)
    return tenant_domain_key(normalized) if normalized else None


class TenantService(CacheableService):
    def __init__(
        self,
        repository: TenantRepository,
        *,
        cache: CacheClient | None = None,
        default_slug: str | None = None,
    ) -> None:
        super().__init__(cache=cache)
        self._repository = repository
        self._default_slug = default_slug or get_settings().default_tenant_slug

    @cached(
        _tenant_cache_key,
        ttl=content_ttl,
        serializer=lambda tenant: tenant.model_dump(mode="json"),
        deserializer=page_deserializer(TenantConfig),
    )
    async def resolve(self, domain: str | None) -> TenantConfig:
        """Tenant for ``domain``, falling back to the default tenant."""

        normalized = normalize_domain(domain)
        tenant = None
        if normalized:
            tenant = await self._repository.find_by_domain(normalized)
        if tenant is None:
            logger.debug(
                "No tenant matches domain %r; using default %r",
                normalized,
                self._default_slug,
            )
            tenant = await self._repository.find_default(self._default_slug)
        if tenant is None:
            raise NotFoundError(TENANT_NOT_FOUND)
        return tenant_config_from_row(tenant)
