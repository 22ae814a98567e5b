"""
System interaction utilities.
"""

from .users import get_current_username

__all__ = [
    "get_current_username",
]
