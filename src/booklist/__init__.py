"""Booklist: terminal client for a remote book list API."""

__version__ = "0.1.0"
