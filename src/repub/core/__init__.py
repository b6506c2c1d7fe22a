"""Core book building logic."""
