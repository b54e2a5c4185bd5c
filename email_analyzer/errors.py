class AnalysisError(Exception):
    """Base class for failures while analyzing an email."""


class ConfigurationError(AnalysisError):
    """Credentials or assistant id are missing or rejected by OpenAI."""


class RemoteCallError(AnalysisError):
    """A call to the Assistants API failed."""


class IncompleteJobError(AnalysisError):
    """The run ended (or was abandoned) without reaching 'completed'."""

    def __init__(self, status: str, message: str = ""):
        super().__init__(message or f"Run finished with status '{status}'")
        self.status = status


class JobTimeoutError(IncompleteJobError):
    """The polling budget ran out while the run was still in progress."""

    def __init__(self, status: str):
        super().__init__(status, f"Run still '{status}' after polling budget was exhausted")
