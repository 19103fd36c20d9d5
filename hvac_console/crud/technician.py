"""
Backend operations for technicians.
"""

from typing import List, Optional

from hvac_console.schemas.technician import Technician, TechnicianForm
from hvac_console.services.api_client import ApiClient


async def get_multi(client: ApiClient, active_only: bool = False) -> List[Technician]:
    """
    List technicians.

    Args:
        client: Authenticated API client
        active_only: Only technicians with is_active=True
    """
    params = {"active_only": "true" if active_only else "false"}
    data = await client.get("technicians", params=params)
    return [Technician.model_validate(item) for item in data or []]


async def get_by_id(client: ApiClient, technician_id: int) -> Technician:
    data = await client.get(f"technicians/{technician_id}")
    return Technician.model_validate(data)


async def create(client: ApiClient, technician_data: TechnicianForm) -> Optional[Technician]:
    data = await client.post("technicians", json=technician_data.model_dump(mode="json"))
    return Technician.model_validate(data) if data else None


async def update(client: ApiClient, technician_id: int, technician_data: TechnicianForm) -> Optional[Technician]:
    data = await client.put(f"technicians/{technician_id}", json=technician_data.model_dump(mode="json"))
    return Technician.model_validate(data) if data else None


async def delete(client: ApiClient, technician_id: int) -> None:
    await client.delete(f"technicians/{technician_id}")
