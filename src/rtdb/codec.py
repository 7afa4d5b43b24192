"""JSON encoding of database values.

Values are plain JSON types or pydantic models. Models are dumped in JSON
mode on the way out; on the way in, callers may pass any type understood
by a pydantic ``TypeAdapter`` to validate the decoded document.
"""

import json
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import MalformedResponseError


def _default(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    raise TypeError(f"cannot serialize {type(obj).__name__}")


def encode(value: Any) -> bytes:
    """Encode a value as a JSON request body."""
    return json.dumps(value, default=_default, separators=(",", ":")).encode("utf-8")


def decode(data: bytes, as_type: Any = None) -> Any:
    """Decode a JSON response body.

    Args:
        data: Raw response body
        as_type: Optional type to validate the decoded value against

    Returns:
        Decoded value; None for an empty body

    Raises:
        MalformedResponseError: If the body is not JSON or does not match ``as_type``
    """
    if not data:
        value = None
    else:
        try:
            value = json.loads(data.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponseError(f"invalid JSON in response: {e}") from e

    if as_type is None:
        return value

    try:
        return TypeAdapter(as_type).validate_python(value)
    except PydanticValidationError as e:
        raise MalformedResponseError(
            f"response does not match {getattr(as_type, '__name__', as_type)}: {e}"
        ) from e
