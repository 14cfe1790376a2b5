"""Central exception hierarchy for the batch sender."""
from __future__ import annotations


class BatchSenderError(Exception):
    """Base exception for all run-level errors raised by the batch sender."""


class ConfigurationError(BatchSenderError):
    """Raised when configuration loading or validation fails."""


class MnemonicError(BatchSenderError):
    """Raised when the mnemonic is missing, too short or cannot derive a key."""


class InputFileError(BatchSenderError):
    """Raised when the input sheet is missing or cannot be read."""


class BroadcastError(BatchSenderError):
    """Raised when the broadcast call itself fails (network, signing, LCD errors)."""


class DependencyError(BatchSenderError):
    """Raised when dependency wiring or injection fails."""
