"""Base error classes for uploadwire."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel, Field


class ErrorContext(BaseModel):
    """Details attached to an error for logs and for the host."""

    technical_details: Dict[str, Any] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)
    related_errors: List[str] = Field(default_factory=list)

    def add_technical_detail(self, key: str, value: Any) -> None:
        self.technical_details[key] = value

    def add_suggestion(self, suggestion: str) -> None:
        self.suggestions.append(suggestion)

    def add_related_error(self, error: BaseException) -> None:
        self.related_errors.append(f"{type(error).__name__}: {error}")


T = TypeVar("T", bound="UploadWireError")


class UploadWireError(Exception):
    """Base exception of the uploader wiring.

    Every error carries a stable ``error_code`` and an ``ErrorContext``,
    and is logged once when created.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        error_code: Optional[str] = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message
            cause: Exception this error was raised from
            error_code: Code for programmatic handling; derived from the
                class name when omitted (``RegistryError`` -> ``REGISTRY``)
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.error_code = error_code or _code_from_class_name(type(self).__name__)
        self.context = ErrorContext()

        if cause is not None:
            self.context.add_related_error(cause)

        logger.bind(error_code=self.error_code).error(message)

    def with_context(self: T, **details: Any) -> T:
        """Attach technical details and return the error."""
        for key, value in details.items():
            self.context.add_technical_detail(key, value)
        return self

    def with_suggestion(self: T, suggestion: str) -> T:
        self.context.add_suggestion(suggestion)
        return self


def _code_from_class_name(name: str) -> str:
    code = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", name).upper()
    return re.sub(r"_ERROR$", "", code)


class ErrorGroup(UploadWireError):
    """Several errors reported together, e.g. by a registry compile."""

    def __init__(self, message: str, errors: List[UploadWireError], **kwargs: Any):
        super().__init__(message, **kwargs)
        self.errors = list(errors)
        for error in self.errors:
            self.context.add_related_error(error)

    def __iter__(self):
        return iter(self.errors)

    def __len__(self):
        return len(self.errors)
