# src/taskdeck/core/errors.py

from __future__ import annotations


class TaskDeckError(Exception):
    """Base exception for taskdeck."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RemoteFailure(TaskDeckError):
    """
    Any failure coming from the remote task API.

    Network errors, non-success statuses and malformed payloads all end up here;
    the controller does not tell them apart.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.operation = operation


class ConfigurationError(TaskDeckError):
    pass
