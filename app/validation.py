"""
Declarative request validation.

The constraints themselves live on the pydantic models in
``app.schemas``; this module only runs them and reports the failures as
``Violation(field, rule)`` pairs that clients can match on.
"""
import uuid
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError, Violation
from app.schemas import ArticleCreate

# pydantic error type -> rule name reported to clients
_RULES: dict[str, str] = {
    "missing": "required",
    "string_too_short": "required",
    "string_too_long": "max_length",
    "string_type": "string",
    "datetime_type": "datetime",
    "datetime_parsing": "datetime",
    "datetime_from_date_parsing": "datetime",
    "model_type": "object",
    "model_attributes_type": "object",
    "dict_type": "object",
}


def violations_from_errors(errors: list[dict], skip_loc_prefix: int = 0) -> list[Violation]:
    """
    Convert pydantic / FastAPI error dicts into ``Violation`` entries.

    *skip_loc_prefix* drops leading ``loc`` items such as ``"body"`` that
    FastAPI prepends to request errors.
    """
    violations: list[Violation] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())[skip_loc_prefix:]]
        field = ".".join(loc) or "body"
        if err.get("input", ...) is None:
            # JSON null counts as an absent field
            rule = "required"
        else:
            rule = _RULES.get(err.get("type", ""), err.get("type", "invalid"))
        violations.append(Violation(field=field, rule=rule))
    return violations


def validate_article_create(payload: Any, *, collect_all: bool = True) -> ArticleCreate:
    """
    Validate a creation payload and return the parsed request.

    Raises ``ValidationError`` listing every failed rule, or only the
    first one when *collect_all* is false.
    """
    try:
        return ArticleCreate.model_validate(payload)
    except PydanticValidationError as exc:
        violations = violations_from_errors(exc.errors())
        if not collect_all:
            violations = violations[:1]
        raise ValidationError(violations) from exc


def parse_article_id(raw: str | None) -> str:
    """Return the canonical string form of *raw*, which must be a UUID."""
    if raw is None or not raw.strip():
        raise ValidationError([Violation("articleId", "required")], "articleId is required")
    try:
        return str(uuid.UUID(raw.strip()))
    except ValueError:
        raise ValidationError([Violation("articleId", "uuid")], "articleId is malformed")
