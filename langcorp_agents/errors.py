"""Exceptions raised by the support chatbot and the search agent."""


class SupportAgentError(Exception):
    """Base class for every error this package raises on purpose."""


class ModelCallError(SupportAgentError):
    """The hosted completion call failed (network, timeout, auth). Never retried here."""


class ClassificationError(SupportAgentError):
    """A routing classification could not be parsed into one of its allowed labels."""

    def __init__(self, message: str, raw_output: str = ""):
        super().__init__(message)
        self.raw_output = raw_output


class TransitionTableError(SupportAgentError, ValueError):
    """The routing table is incomplete or inconsistent."""


class InvalidTransitionError(SupportAgentError, KeyError):
    """No transition is defined for the requested state and trigger."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
