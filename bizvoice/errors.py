"""Exception types raised by bizvoice."""

from typing import Any, Dict


class BizVoiceError(Exception):
    """Base class for bizvoice errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Dict[str, Any] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UnsupportedCapabilityError(BizVoiceError):
    """Speech input or output is not available on this host."""

    def __init__(self, capability: str):
        super().__init__(
            code="UNSUPPORTED_CAPABILITY",
            message=f"{capability} not supported",
            details={"capability": capability}
        )


class RecognitionFailure(BizVoiceError):
    """The host's speech recognizer reported an error."""

    def __init__(self, error_code: str):
        self.error_code = error_code
        super().__init__(
            code="RECOGNITION_FAILURE",
            message=f"Speech recognition failed: {error_code}",
            details={"error_code": error_code}
        )


class SessionBusyError(BizVoiceError):
    """A recognition session is already listening."""

    def __init__(self):
        super().__init__(
            code="SESSION_BUSY",
            message="A recognition session is already in progress",
        )


class StorageCorruptionError(BizVoiceError):
    """A persisted collection could not be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            code="STORAGE_CORRUPTION",
            message=f"Stored value for '{key}' is unreadable: {reason}",
            details={"key": key, "reason": reason}
        )
