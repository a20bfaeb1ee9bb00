"""Error taxonomy for the chat AI bridge."""


class BridgeError(Exception):
    """Base class for bridge errors."""


class ConfigurationError(BridgeError, ValueError):
    """Required configuration (e.g. an access token) is missing."""


class UninitializedUseError(BridgeError, RuntimeError):
    """Agent used before init() completed."""


class ProviderError(BridgeError):
    """Completion request failed or returned an unusable response."""


class TransportError(BridgeError):
    """Outbound chat call (send/update/event) failed."""
