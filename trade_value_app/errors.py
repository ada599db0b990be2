"""Exceptions shared by the store backends."""

from __future__ import annotations


class SettingsStoreError(RuntimeError):
    """Raised when the backing store cannot be read or written."""
