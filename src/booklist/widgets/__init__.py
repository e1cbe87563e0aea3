"""Booklist TUI widgets."""
