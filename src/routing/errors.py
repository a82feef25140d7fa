"""
Failure taxonomy for routing providers.

Provider failures are recovered locally by the resolver, which advances the
fallback chain. Only ``AllProvidersFailed`` reaches the resolver's outer
stage, where it is masked by a synthetic route.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional


class FailureKind(Enum):
    TIMEOUT = "timeout"
    INVALID_RESPONSE = "invalid_response"
    DEGENERATE_DISTANCE = "degenerate_distance"
    NETWORK = "network"
    ALL_PROVIDERS_FAILED = "all_providers_failed"


class ProviderError(Exception):
    """Base class for a single provider attempt that did not yield a route."""

    kind: FailureKind = FailureKind.INVALID_RESPONSE

    def __init__(self, message: str, provider: Optional[str] = None, payload: Any = None):
        super().__init__(message)
        self.provider = provider
        self.payload = payload

    def __str__(self) -> str:
        base = super().__str__()
        if self.provider:
            return f"[{self.provider}] {base}"
        return base


class ProviderTimeout(ProviderError):
    """The request did not settle before its deadline."""
    kind = FailureKind.TIMEOUT


class InvalidResponse(ProviderError):
    """Non-success status, unparseable body, or missing geometry/segment fields."""
    kind = FailureKind.INVALID_RESPONSE


class DegenerateDistance(ProviderError):
    """Provider reported a distance that rounds to zero."""
    kind = FailureKind.DEGENERATE_DISTANCE


class ProviderUnavailable(ProviderError):
    """Request-level failure (connection refused, DNS, TLS, undecodable body, redirect loop)."""
    kind = FailureKind.NETWORK


class AllProvidersFailed(ProviderError):
    """Every provider in the chain failed."""
    kind = FailureKind.ALL_PROVIDERS_FAILED

    def __init__(self, failures: List[ProviderError]):
        summary = "; ".join(f"{f.provider}: {f.kind.value}" for f in failures) or "no providers"
        super().__init__(f"All providers failed ({summary})")
        self.failures = failures
