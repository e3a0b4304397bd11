"""
Domain exceptions for the EcoPilot backend.
Pure-core errors are raised to the immediate caller; delivery errors are
caught per recipient by the orchestrator.
"""


class EcoPilotError(Exception):
    """Base class for all EcoPilot backend errors."""


class ConfigurationError(EcoPilotError):
    """A static pool or milestone set is empty or invalid."""


class MalformedInputError(EcoPilotError):
    """A document or request is missing a required field or has the wrong type."""


class PersistenceError(EcoPilotError):
    """A notification record could not be written to Firestore."""

    def __init__(self, user_id, message):
        super().__init__(message)
        self.user_id = user_id
