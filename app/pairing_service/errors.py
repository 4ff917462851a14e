"""Exceptions raised by the pairing service and its storage."""


class PairingServiceError(Exception):
    """Base exception for pairing service failures."""
    pass


class InvalidPairingError(PairingServiceError):
    """Raised when a pairing payload does not hold two valid locations."""
    pass


class PairingNotFoundError(PairingServiceError):
    """Raised when no pairing is stored under the requested id."""
    pass


class StorageError(PairingServiceError):
    """Raised when the pairing store cannot be reached."""
    pass
