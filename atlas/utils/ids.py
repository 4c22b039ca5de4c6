# atlas/utils/ids.py
from typing import Union
from uuid import UUID

from atlas.core.exceptions import NotFoundError


def as_uuid(value: Union[UUID, str], kind: str = "Resource") -> UUID:
    """Coerce an identifier; a malformed one cannot exist, so it is NotFound"""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFoundError(f"{kind} {value} not found", {"id": str(value)})
