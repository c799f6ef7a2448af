from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CorveeError(Exception):
    message: str
    code: int

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class UsageError(CorveeError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 2)


class ValidationError(CorveeError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 3)


class NotFoundError(ValidationError):
    """Unknown person or task id; the web API answers these with 404."""


class ConflictError(CorveeError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 4)


class IOErrorWithCode(CorveeError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 5)
