"""Booklist TUI screens."""

from .main import MainScreen
from .about import AboutScreen
from .activity import ActivityScreen
from .password import PasswordScreen

__all__ = [
    "MainScreen",
    "AboutScreen",
    "ActivityScreen",
    "PasswordScreen",
]
