"""Test utilities for bridle applications.

::

    from bridle.testing import TestClient
"""

from bridle.testing.client import TestClient

__all__ = ["TestClient"]
