from __future__ import annotations


class FormEngineError(Exception):
    """Base class for engine misuse and configuration problems (never for bad form input)."""


class WizardStateError(FormEngineError):
    """An operation was called from a wizard state that does not allow it."""


class StorageError(FormEngineError):
    """The storage adapter is not configured or returned nothing usable."""
