class DeviceInfoServiceError(Exception):
    """Base class for every error raised by the device info service."""


class ConfigError(DeviceInfoServiceError):
    """Configuration is missing or invalid. Fatal at startup."""


class StoreConnectionError(DeviceInfoServiceError):
    """Firestore could not be reached at startup."""


class StoreError(DeviceInfoServiceError):
    """A Firestore query or write failed while serving a request."""
