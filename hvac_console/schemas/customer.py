"""
Pydantic schemas for Customer records and the customer form.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class CustomerBase(BaseModel):
    """Fields shared by the customer record and the customer form"""
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    address: str = Field(..., min_length=1)
    notes: Optional[str] = None


class CustomerForm(CustomerBase):
    """Payload sent to the backend when creating or updating a customer"""
    pass


class Customer(CustomerBase):
    """Customer record as returned by the backend"""
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    phone: str = ""
    address: str = ""
