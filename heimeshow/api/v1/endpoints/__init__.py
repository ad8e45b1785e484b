"""
API endpoints module
"""

from . import auth, booking, health

__all__ = [
    "auth",
    "booking",
    "health",
]
