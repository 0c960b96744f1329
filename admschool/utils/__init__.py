"""
Utility functions
"""

from admschool.utils.clock import utc_now

__all__ = [
    "utc_now",
]
