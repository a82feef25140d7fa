"""Test package for the route resolver.

This package contains:
- Unit tests (test_spatial.py, test_routing.py, test_providers.py, test_resolver.py)
- Configuration tests (test_config.py)
- Server tests (test_actions.py)
- Shared fixtures and fake providers (conftest.py)
"""
