"""Assemble a ``RouteResolver`` from a configuration profile."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .config import ProviderSettings, ResolverConfig
from .providers import PROVIDER_CLASSES, RouteProvider
from .resolver import RouteResolver
from .traffic import TrafficEstimator

logger = logging.getLogger(__name__)

# Fixed priority: richest geometry first, most reliable fallback second,
# remaining alternates last.
DEFAULT_PROVIDER_ORDER = ["osrm", "openrouteservice", "google", "mapbox"]


def build_provider(
    settings: ProviderSettings,
    api_key: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    traffic: Optional[TrafficEstimator] = None,
) -> RouteProvider:
    """Instantiate one provider from its settings."""
    try:
        provider_cls = PROVIDER_CLASSES[settings.name]
    except KeyError:
        raise ValueError(
            f"Unknown provider '{settings.name}'. Available: {', '.join(sorted(PROVIDER_CLASSES))}"
        ) from None

    return provider_cls(
        base_url=settings.base_url,
        api_key=api_key,
        timeout_s=settings.timeout_s,
        transport=transport,
        traffic=traffic,
    )


def build_providers(
    config: ResolverConfig,
    api_keys: Optional[Mapping[str, Optional[str]]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    traffic: Optional[TrafficEstimator] = None,
) -> List[RouteProvider]:
    """
    Build the provider chain in configured order.

    Providers that need an API key and have none in ``api_keys`` (keyed by
    provider name) are left out of the chain.
    """
    api_keys = api_keys or {}
    settings_list = config.providers or [ProviderSettings(name=n) for n in DEFAULT_PROVIDER_ORDER]

    providers: List[RouteProvider] = []
    for settings in settings_list:
        if not settings.enabled:
            logger.debug("Provider %s disabled in configuration", settings.name)
            continue

        provider_cls = PROVIDER_CLASSES.get(settings.name)
        key = api_keys.get(settings.name)
        if provider_cls is not None and provider_cls.requires_api_key and not key:
            logger.warning("Skipping provider %s: no API key configured", settings.name)
            continue

        providers.append(build_provider(settings, api_key=key, transport=transport, traffic=traffic))

    logger.info("Provider chain: %s", " -> ".join(p.name for p in providers) or "(empty)")
    return providers


def create_resolver(
    profile: Optional[Dict[str, Any]] = None,
    api_keys: Optional[Mapping[str, Optional[str]]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    traffic: Optional[TrafficEstimator] = None,
) -> RouteResolver:
    """
    Create a resolver from a loaded profile.

    Args:
        profile: Profile dictionary (see ``configs/default.yaml``); only its
            ``resolver`` section is used
        api_keys: API keys keyed by provider name, supplied by the embedding
            application
        transport: Optional httpx transport shared by all providers
        traffic: Optional traffic estimator (e.g. with a fixed clock)

    Returns:
        Configured RouteResolver
    """
    config = ResolverConfig.from_dict((profile or {}).get("resolver"))
    traffic = traffic or TrafficEstimator()
    providers = build_providers(config, api_keys, transport=transport, traffic=traffic)
    return RouteResolver(providers, config=config, traffic=traffic)
