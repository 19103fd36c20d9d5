from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from hvac_console.schemas.customer import Customer


class JobStatusEnum(str, Enum):
    """Appointment status as stored by the backend"""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").upper()


# Status transitions offered as one-click actions on the jobs list
STATUS_ACTIONS = {
    JobStatusEnum.SCHEDULED: (JobStatusEnum.IN_PROGRESS, "Start Job"),
    JobStatusEnum.IN_PROGRESS: (JobStatusEnum.COMPLETED, "Complete"),
}


class JobForm(BaseModel):
    """Payload for creating or updating a job"""
    customer_id: int
    technician_id: Optional[int] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: int = Field(60, ge=15)
    price: Optional[float] = Field(None, ge=0)


class JobAssignRequest(BaseModel):
    """Body of PATCH /jobs/{id}/assign; null unassigns the job"""
    technician_id: Optional[int] = None


class JobStatusUpdateRequest(BaseModel):
    """Body of PATCH /jobs/{id}/status"""
    status: JobStatusEnum


class Job(BaseModel):
    """Job record as returned by the backend"""
    model_config = ConfigDict(extra="ignore")

    id: int
    customer_id: int
    technician_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: int = 60
    price: Optional[float] = None
    status: JobStatusEnum = JobStatusEnum.SCHEDULED
    customer: Optional[Customer] = None

    @property
    def next_action(self) -> Optional[tuple]:
        """(target status, button label) for the row action, if any"""
        return STATUS_ACTIONS.get(self.status)
