from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SERVER_TIMESTAMP_METHOD = "serverTimestamp"


class DocumentKind(str, Enum):
    LIBRARY_ITEM = "libraryItem"
    TOURNAMENT = "tournament"
    GAME_SESSION = "gameSession"


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Role(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"
    NONE = "none"


class Actor(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str = Field(min_length=1)


class ClientSupplied(BaseModel):
    """A time value written by the client, normally an ISO-8601 string."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["client"] = "client"
    value: str


class ServerAssigned(BaseModel):
    """Placeholder asking the store to stamp the current server time on write."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["server"] = "server"


SERVER_TIMESTAMP = ServerAssigned()


def is_server_sentinel(value: Any) -> bool:
    if isinstance(value, ServerAssigned):
        return True
    if not isinstance(value, dict):
        return False
    # wire sentinel, or the union's own serialized form
    return value.get("_methodName") == SERVER_TIMESTAMP_METHOD or value == {"kind": "server"}


def parse_timestamp_like(value: Any) -> Optional[Union[ClientSupplied, ServerAssigned]]:
    """Map a raw field value onto the timestamp union.

    None stays None (absent and null are the same thing here). Raises ValueError
    for anything that is neither a string nor the server sentinel.
    """
    if value is None:
        return None
    if isinstance(value, (ClientSupplied, ServerAssigned)):
        return value
    if isinstance(value, str):
        return ClientSupplied(value=value)
    if is_server_sentinel(value):
        return SERVER_TIMESTAMP
    if isinstance(value, dict) and value.get("kind") == "client" and isinstance(value.get("value"), str):
        return ClientSupplied(value=value["value"])
    raise ValueError(f"Not a timestamp-like value: {value!r}")


class CamelModel(BaseModel):
    """Base for stored documents: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)
