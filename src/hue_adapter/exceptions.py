"""Exceptions for the hue_adapter package."""


class HueAdapterException(Exception):
    """Base exception for all Philips Hue adapter errors."""

    def __init__(self, id: int, message: str):
        self.id = id
        self.message = message
        super().__init__(f"Error {id}: {message}")


class PairingError(HueAdapterException):
    """Exception raised when the bridge refuses a registration request."""

    pass


class RequestTimeout(HueAdapterException):
    """Exception raised when a request to the bridge times out."""

    pass


class MissingCredential(HueAdapterException):
    """Exception raised when an operation needs a username the bridge has not granted yet."""

    pass


class StorageError(HueAdapterException):
    """Exception raised when the persistent key-value store cannot be read or written."""

    pass
