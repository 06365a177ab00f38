# /app/models/common_model.py

# --- Core Imports ---
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """
    Base for every API contract model.

    Python attributes stay snake_case (so they line up with the ORM columns and
    `from_attributes` works), while the JSON wire format is camelCase. Incoming
    payloads are accepted in either spelling.
    """
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class Pagination(APIModel):
    current: int = Field(..., description="The current page number (1-based).")
    total: int = Field(..., description="The total number of pages.")
    count: int = Field(..., description="The number of items on this page.")
    total_records: int
    has_next: bool
    has_prev: bool


class MessageResponse(APIModel):
    success: bool = True
    message: str
