# backend/balance_tracker/schemas/base.py
"""
Base model for API schemas.

JSON bodies use camelCase keys (accessToken, processedRecords) while Python
code keeps snake_case attributes. Requests accept either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """BaseModel that serializes field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
