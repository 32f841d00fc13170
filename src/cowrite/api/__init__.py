"""API module."""

from .routes import router
from .models import ErrorResponse, HealthResponse

__all__ = ["router", "ErrorResponse", "HealthResponse"]
