"""Domain exceptions for cowrite."""


class CowriteError(Exception):
    """Base exception for all cowrite errors."""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message)
        self.recoverable = recoverable


class PreconditionError(CowriteError):
    """A required identifier or input is missing.

    Terminal for the request that raised it; never retried.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, recoverable=False)
        self.field = field


class ExternalCollaboratorError(CowriteError):
    """An external collaborator (agent, store) failed.

    The canonical artifact is left untouched and the failure is surfaced
    to the view layer as a flag.
    """

    error_code = "external_failure"


class AgentError(ExternalCollaboratorError):
    """The agent call returned no usable result."""

    error_code = "agent_failure"

    def __init__(
        self,
        message: str,
        agent_name: str | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message, recoverable)
        self.agent_name = agent_name


class StoreError(ExternalCollaboratorError):
    """The key-value store was unreachable or rejected an operation."""

    error_code = "store_failure"

    def __init__(
        self,
        message: str,
        namespace: tuple[str, ...] | None = None,
        key: str | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message, recoverable)
        self.namespace = namespace
        self.key = key
