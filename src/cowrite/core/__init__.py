"""Core domain modules."""

from cowrite.core.exceptions import (
    AgentError,
    CowriteError,
    ExternalCollaboratorError,
    PreconditionError,
    StoreError,
)

__all__ = [
    "AgentError",
    "CowriteError",
    "ExternalCollaboratorError",
    "PreconditionError",
    "StoreError",
]
