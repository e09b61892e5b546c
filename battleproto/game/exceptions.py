"""Custom exceptions for protocol decoding and battle state errors."""


class ProtocolError(Exception):
    """Base class for errors raised while decoding or applying protocol lines."""


class MalformedFieldError(ProtocolError):
    """Raised when a compound protocol field cannot be interpreted.

    Sub-field parsers signal malformed input by returning None; this exception
    is raised by callers that need a hard failure instead, such as the replay
    script's strict mode when an HP field cannot be parsed.

    Attributes:
        field_name: Name of the field being parsed (e.g. "hp", "details")
        value: The raw field text
    """

    def __init__(self, field_name: str, value: str):
        """Initialize the MalformedFieldError.

        Args:
            field_name: Name of the field being parsed
            value: The raw field text
        """
        self.field_name = field_name
        self.value = value
        super().__init__(f"Malformed {field_name}: {value!r}")


class MissingReferentError(ProtocolError):
    """Raised when a line names a side or slot that does not exist.

    Attributes:
        referent: The identifier that could not be resolved
    """

    def __init__(self, referent: str):
        self.referent = referent
        super().__init__(f"Unknown referent: {referent!r}")


class PayloadError(ProtocolError):
    """Raised when a JSON payload carried by a protocol line cannot be decoded.

    Attributes:
        command: The protocol command that carried the payload
    """

    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(f"Invalid {command} payload: {message}")
