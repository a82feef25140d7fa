"""
Configuration loader for routing profiles and environment variables.
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional
import yaml

DEFAULT_PROFILE = "default"

# Provider name -> environment variable holding its API key
API_KEY_ENV_VARS = {
    "openrouteservice": "ORS_API_KEY",
    "google": "GOOGLE_MAPS_API_KEY",
    "mapbox": "MAPBOX_ACCESS_TOKEN",
}


class ConfigLoader:
    """Load and manage configuration from YAML files and environment."""

    CONFIG_DIR = Path(__file__).parent.parent.parent / "configs"

    @classmethod
    def load_profile(cls, profile_name: str = DEFAULT_PROFILE) -> Dict[str, Any]:
        """
        Load a routing profile.

        Args:
            profile_name: Name of a YAML file in ``configs/`` without extension

        Returns:
            Dictionary with configuration values

        Raises:
            FileNotFoundError: If profile doesn't exist
        """
        profile_path = cls.CONFIG_DIR / f"{profile_name}.yaml"

        if not profile_path.exists():
            available = sorted(f.stem for f in cls.CONFIG_DIR.glob("*.yaml"))
            raise FileNotFoundError(
                f"Profile '{profile_name}' not found. Available profiles: {', '.join(available)}"
            )

        with open(profile_path, "r") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def get_profile_from_env(cls) -> Optional[str]:
        """Get profile name from ROUTING_PROFILE environment variable."""
        return os.getenv("ROUTING_PROFILE")

    @classmethod
    def load_default_or_env_profile(cls) -> Dict[str, Any]:
        """Load the profile named by ROUTING_PROFILE, or the default profile."""
        profile = cls.get_profile_from_env() or DEFAULT_PROFILE
        return cls.load_profile(profile)

    @classmethod
    def api_keys_from_env(cls, profile: Optional[Dict[str, Any]] = None) -> Dict[str, Optional[str]]:
        """
        Read provider API keys from the environment.

        A provider entry in the profile's ``resolver.providers`` list may name
        its own ``api_key_env``; otherwise the standard variable is used.
        Keys are read at call time so modules import without them.
        """
        env_vars = dict(API_KEY_ENV_VARS)
        resolver_cfg = (profile or {}).get("resolver") or {}
        for entry in resolver_cfg.get("providers") or []:
            if entry.get("api_key_env"):
                env_vars[entry["name"]] = entry["api_key_env"]

        return {name: os.getenv(var) or None for name, var in env_vars.items()}


def get_config() -> Dict[str, Any]:
    """Convenience function to get current configuration."""
    return ConfigLoader.load_default_or_env_profile()
