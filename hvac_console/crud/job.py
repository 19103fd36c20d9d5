"""
Backend operations for jobs.

Encapsulates the /jobs endpoints so page handlers only deal in schemas.
"""

from datetime import date
from typing import List, Optional

from hvac_console.schemas.job import (
    Job,
    JobForm,
    JobAssignRequest,
    JobStatusEnum,
    JobStatusUpdateRequest,
)
from hvac_console.services.api_client import ApiClient


async def get_multi(
    client: ApiClient,
    status: Optional[JobStatusEnum] = None,
    technician_id: Optional[int] = None,
    on_date: Optional[date] = None,
    sort: Optional[str] = None,
) -> List[Job]:
    """
    List jobs, optionally filtered server-side.

    Args:
        client: Authenticated API client
        status: Only jobs in this status
        technician_id: Only jobs assigned to this technician
        on_date: Only jobs scheduled on this day
        sort: Backend sort key

    Returns:
        List of Job records (empty when the backend returns null)
    """
    params = {
        "status": status.value if status else None,
        "technician_id": technician_id,
        "date": on_date.isoformat() if on_date else None,
        "sort": sort,
    }
    data = await client.get("jobs", params=params)
    return [Job.model_validate(item) for item in data or []]


async def get_by_id(client: ApiClient, job_id: int) -> Job:
    data = await client.get(f"jobs/{job_id}")
    return Job.model_validate(data)


async def create(client: ApiClient, job_data: JobForm) -> Optional[Job]:
    data = await client.post("jobs", json=job_data.model_dump(mode="json"))
    return Job.model_validate(data) if data else None


async def update(client: ApiClient, job_id: int, job_data: JobForm) -> Optional[Job]:
    data = await client.put(f"jobs/{job_id}", json=job_data.model_dump(mode="json"))
    return Job.model_validate(data) if data else None


async def delete(client: ApiClient, job_id: int) -> None:
    await client.delete(f"jobs/{job_id}")


async def assign_technician(client: ApiClient, job_id: int, technician_id: Optional[int]) -> None:
    """Assign a technician to a job; None unassigns it."""
    body = JobAssignRequest(technician_id=technician_id)
    await client.patch(f"jobs/{job_id}/assign", json=body.model_dump(mode="json"))


async def update_status(client: ApiClient, job_id: int, status: JobStatusEnum) -> None:
    body = JobStatusUpdateRequest(status=status)
    await client.patch(f"jobs/{job_id}/status", json=body.model_dump(mode="json"))
