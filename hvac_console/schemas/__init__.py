"""
Record and form schemas mirrored from the scheduling backend.
"""

from hvac_console.schemas.customer import Customer, CustomerForm
from hvac_console.schemas.technician import Technician, TechnicianForm
from hvac_console.schemas.job import Job, JobForm, JobStatusEnum
from hvac_console.schemas.user import User, AuthResponse

__all__ = [
    "Customer",
    "CustomerForm",
    "Technician",
    "TechnicianForm",
    "Job",
    "JobForm",
    "JobStatusEnum",
    "User",
    "AuthResponse",
]
