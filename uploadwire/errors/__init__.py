"""Error types for uploadwire.

This module provides:
- A base error carrying rich context and recovery suggestions
- Configuration errors raised while resolving the upload wiring
- Registry errors raised while building or compiling services
"""

from .base import ErrorContext, ErrorGroup, UploadWireError
from .types import ConfigurationError, RegistryError

__all__ = [
    "UploadWireError",
    "ErrorContext",
    "ErrorGroup",
    "ConfigurationError",
    "RegistryError",
]
