"""
Turn pydantic validation failures into structured field errors
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr, ValidationError

from gestia.core.errors import InvalidInput

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def field_errors(exc: ValidationError) -> Dict[str, str]:
    """Map each failing field to its first message"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


def parse_input(schema: Type[SchemaT], data: Any) -> SchemaT:
    """Validate a raw payload; failures raise InvalidInput with field -> message"""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    if not isinstance(data, Mapping):
        raise InvalidInput({"__root__": "Payload must be an object"})

    try:
        return schema.model_validate(dict(data))
    except ValidationError as exc:
        raise InvalidInput(field_errors(exc)) from exc


def normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def to_naive_utc(value: datetime) -> datetime:
    """Store every timestamp as naive UTC"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Reusable annotated field types
NormalizedEmail = Annotated[EmailStr, BeforeValidator(normalize_email)]
LoginEmail = Annotated[str, BeforeValidator(normalize_email)]
OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(blank_to_none)]
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]
UtcDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
