"""
Shared schema helpers
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, like the mobile client sends"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def success_response(message: str, data: Optional[Any] = None) -> Dict[str, Any]:
    """Envelope used by every endpoint: {success, message, data}"""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True, exclude_none=True)
    elif isinstance(data, list):
        data = [
            item.model_dump(mode="json", by_alias=True, exclude_none=True) if isinstance(item, BaseModel) else item
            for item in data
        ]
    return {"success": True, "message": message, "data": data}
