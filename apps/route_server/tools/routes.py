"""Resolver wiring for the route server."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from src.routing import RouteResolver, create_resolver
from src.tools.config_loader import ConfigLoader

logger = logging.getLogger(__name__)

_RESOLVER: Optional[RouteResolver] = None


def _load_profile(name: Optional[str] = None) -> Dict[str, Any]:
    if name:
        return ConfigLoader.load_profile(name)
    return ConfigLoader.load_default_or_env_profile()


def get_resolver() -> RouteResolver:
    """
    Shared resolver for the process.

    Built on first use so the module imports without a profile or API keys.
    The resolver owns the session cache, so it must outlive single requests.
    """
    global _RESOLVER
    if _RESOLVER is None:
        profile = _load_profile()
        _RESOLVER = create_resolver(profile, api_keys=ConfigLoader.api_keys_from_env(profile))
        logger.info("Route resolver ready (providers: %s)", ", ".join(_RESOLVER.provider_names) or "none")
    return _RESOLVER


def set_resolver(resolver: Optional[RouteResolver]) -> None:
    """Replace (or with None, reset) the shared resolver."""
    global _RESOLVER
    _RESOLVER = resolver
