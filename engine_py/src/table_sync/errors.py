# engine_py/src/table_sync/errors.py

class SyncError(Exception):
    """Base exception for synchronization errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
TRANSPORT_ERROR = "TRANSPORT_ERROR"
DECODE_ERROR = "DECODE_ERROR"
UNKNOWN_EVENT = "UNKNOWN_EVENT"
PROTOCOL_ERROR = "PROTOCOL_ERROR"
INVALID_COMMAND = "INVALID_COMMAND"


class TransportError(SyncError):
    """Channel failed to open or closed unexpectedly."""
    def __init__(self, message: str):
        super().__init__(TRANSPORT_ERROR, message)


class DecodeError(SyncError):
    """Frame is not parseable or has no usable type tag."""
    def __init__(self, message: str):
        super().__init__(DECODE_ERROR, message)


class UnknownEventError(SyncError):
    """Frame is well formed but its type is not in the catalogue."""
    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(UNKNOWN_EVENT, f"Unknown event type: {event_type}")


class ProtocolError(SyncError):
    """Recognized type with a payload of the wrong shape."""
    def __init__(self, message: str):
        super().__init__(PROTOCOL_ERROR, message)


class CommandError(SyncError, ValueError):
    """Outbound command could not be built."""
    def __init__(self, message: str):
        super().__init__(INVALID_COMMAND, message)
