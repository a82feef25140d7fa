"""Configuration for the route resolver and its providers."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from .cache import DEFAULT_MAXSIZE, DEFAULT_PRECISION, DEFAULT_SYNTHETIC_TTL


@dataclass
class ProviderSettings:
    """Settings for one provider in the fallback chain."""

    name: str
    """Registry name: osrm, openrouteservice, google or mapbox."""

    base_url: Optional[str] = None
    """Override of the provider's public endpoint."""

    timeout_s: Optional[float] = None
    """Overall request deadline; provider default when unset."""

    api_key_env: Optional[str] = None
    """Environment variable the embedding application reads the key from."""

    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProviderSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown provider setting(s): {', '.join(sorted(unknown))}")
        return cls(**data)


@dataclass
class ResolverConfig:
    """Configuration for ``RouteResolver``."""

    primary_retries: int = 2
    """Retries for the first provider in the chain. Others are tried once."""

    retry_delay_s: float = 1.0
    """Linear backoff step after a failed (non-timeout) primary attempt."""

    timeout_retry_delay_s: float = 2.0
    """Linear backoff step after a timed-out primary attempt."""

    cache_maxsize: int = DEFAULT_MAXSIZE
    cache_precision: int = DEFAULT_PRECISION

    provider_ttl_s: Optional[float] = None
    """TTL for provider routes; None keeps them for the whole session."""

    cache_synthetic: bool = True
    """Cache synthetic routes (in their own TTL cache)."""

    synthetic_ttl_s: Optional[float] = DEFAULT_SYNTHETIC_TTL

    single_flight: bool = True
    """Share one in-flight resolution between concurrent identical requests."""

    densify_straight_lines: bool = False
    """Replace bare two-point provider geometry with estimated waypoints."""

    gap_threshold_m: float = 20.0
    gap_dot_spacing_m: float = 30.0

    providers: List[ProviderSettings] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.primary_retries < 0:
            raise ValueError("primary_retries must be >= 0")
        if self.retry_delay_s < 0 or self.timeout_retry_delay_s < 0:
            raise ValueError("retry delays must be >= 0")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ResolverConfig":
        """
        Build a config from a profile dictionary.

        Expects the ``resolver`` section's keys at top level plus an optional
        ``providers`` list of provider setting mappings.
        """
        data = dict(data or {})
        providers = [ProviderSettings.from_dict(p) for p in data.pop("providers", []) or []]
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown resolver setting(s): {', '.join(sorted(unknown))}")
        return cls(providers=providers, **data)

    def backoff_delay(self, attempt: int, timed_out: bool) -> float:
        """Delay before retry number ``attempt + 1`` (linear in the attempt index)."""
        step = self.timeout_retry_delay_s if timed_out else self.retry_delay_s
        return step * (attempt + 1)
