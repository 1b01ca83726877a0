"""
Shared response envelope and base schema configuration.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Schema exposed to clients with camelCase keys, accepting either form on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResponseEnvelope(BaseModel, Generic[DataT]):
    """Every JSON response is {status, message?, count?, data?}."""
    status: str = "success"
    message: Optional[str] = None
    count: Optional[int] = None
    data: Optional[DataT] = None
