"""Test utilities for hitrouter applications.

    from hitrouter.testing import TestClient
"""

from hitrouter.testing.client import TestClient

__all__ = ["TestClient"]
