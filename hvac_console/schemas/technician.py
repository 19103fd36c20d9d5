from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TechnicianForm(BaseModel):
    """Payload for creating or updating a technician"""
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    is_active: bool = True


class Technician(BaseModel):
    """Technician record as returned by the backend"""
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    phone: str = ""
    email: Optional[str] = None
    is_active: bool = True
