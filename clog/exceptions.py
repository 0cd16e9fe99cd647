class ClogError(Exception):
    """Base class for errors raised by the clog package."""


class OutputFormatLockedError(ClogError):
    """Exception raised when the output format is changed during a session.

    Attributes:
        current: format the destination was initialized with
        requested: format the caller tried to switch to
    """

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot switch output format from {current.name} to {requested.name} while the destination "
            f"is initialized. Call terminate() first."
        )


class StreamLockedError(ClogError):
    """Exception raised when the output stream is replaced during a session.

    Attributes:
        current: stream the destination was initialized with
        requested: stream the caller tried to switch to
    """

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot switch output stream from {current!r} to {requested!r} while the destination "
            f"is initialized. Call terminate() first."
        )
