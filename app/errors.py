"""
Error taxonomy for the article service.

Each error carries the HTTP status it maps to; the exception handlers in
``app.main`` turn them into JSON responses exactly once.  The service
never retries and never converts one kind into another after the fact.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Violation:
    """A single failed validation rule, e.g. ``Violation("title", "required")``."""

    field: str
    rule: str

    def as_dict(self) -> dict:
        return {"field": self.field, "rule": self.rule}


class ArticleError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ArticleError):
    status_code = 400

    def __init__(self, violations: list[Violation], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.violations = list(violations)


class NotFoundError(ArticleError):
    status_code = 404


class CapacityError(ArticleError):
    status_code = 403


class PayloadTooLargeError(ArticleError):
    status_code = 400


class StorageError(ArticleError):
    status_code = 500


class ImageWriteError(StorageError):
    """Writing an image payload to the image directory failed."""
