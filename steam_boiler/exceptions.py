"""
Custom exceptions for the steam boiler controller.

Faults detected while running a cycle are never raised; they become mode
changes and outbound messages. These exceptions cover misuse of the library
and bad configuration.
"""


class BoilerError(Exception):
    """Base exception for all steam boiler library errors."""
    pass


class ConfigurationError(BoilerError):
    """Invalid or unreadable boiler characteristics."""
    pass


class MessageError(BoilerError):
    """Message built with parameters that do not match its kind."""

    def __init__(self, message: str, kind: str = None):
        super().__init__(message)
        self.kind = kind


class TransitionError(BoilerError):
    """Mode transition with no defined edge."""

    def __init__(self, mode, event):
        super().__init__(f"No transition from {mode.name} on {event.name}")
        self.mode = mode
        self.event = event


class TraceError(BoilerError):
    """Malformed replay trace."""
    pass
