"""
Dashboard summary built from the job, customer and technician lists.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from hvac_console.schemas.customer import Customer
from hvac_console.schemas.job import Job, JobStatusEnum
from hvac_console.schemas.technician import Technician

TODAY_SCHEDULE_LIMIT = 5


class DashboardSummary(BaseModel):
    """Numbers and the short schedule shown on the dashboard."""
    total_jobs: int = 0
    scheduled_jobs: int = 0
    total_customers: int = 0
    total_technicians: int = 0
    today_jobs: List[Job] = []


def local_day(value: datetime) -> date:
    if value.tzinfo is None:
        return value.date()
    return value.astimezone().date()


def build_summary(
    jobs: List[Job],
    customers: List[Customer],
    technicians: List[Technician],
    today: Optional[date] = None,
) -> DashboardSummary:
    """
    Summarise the loaded lists.

    Today's schedule keeps the backend order and is capped at
    TODAY_SCHEDULE_LIMIT entries.
    """
    today = today or date.today()

    todays = [job for job in jobs if local_day(job.scheduled_at) == today]

    return DashboardSummary(
        total_jobs=len(jobs),
        scheduled_jobs=sum(1 for job in jobs if job.status == JobStatusEnum.SCHEDULED),
        total_customers=len(customers),
        total_technicians=len(technicians),
        today_jobs=todays[:TODAY_SCHEDULE_LIMIT],
    )
