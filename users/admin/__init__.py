"""users admin package imports."""

from .user import CustomUserAdmin

__all__ = [
    "CustomUserAdmin",
]
