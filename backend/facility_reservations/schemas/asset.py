"""
Pydantic schemas for the asset catalog.
"""

from pydantic import BaseModel


class AssetResponse(BaseModel):
    id: int
    name: str
    capacity: int
    type: str
    facilities: list[str]

    model_config = {"from_attributes": True}
