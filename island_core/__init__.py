"""
Core runtime of the island layout: activity ordering and window routing.
"""

from .order_engine import OrderEngine  # noqa: F401
from .window_router import WindowRouter  # noqa: F401
