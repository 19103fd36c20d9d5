"""
Backend operations for customers.
"""

from typing import List, Optional

from hvac_console.schemas.customer import Customer, CustomerForm
from hvac_console.services.api_client import ApiClient


async def get_multi(client: ApiClient, search: Optional[str] = None) -> List[Customer]:
    """
    List customers, optionally matching a search term.

    Matching is done by the backend; blank terms are not sent.
    """
    params = {"search": search.strip() if search and search.strip() else None}
    data = await client.get("customers", params=params)
    return [Customer.model_validate(item) for item in data or []]


async def get_by_id(client: ApiClient, customer_id: int) -> Customer:
    data = await client.get(f"customers/{customer_id}")
    return Customer.model_validate(data)


async def create(client: ApiClient, customer_data: CustomerForm) -> Optional[Customer]:
    data = await client.post("customers", json=customer_data.model_dump(mode="json"))
    return Customer.model_validate(data) if data else None


async def update(client: ApiClient, customer_id: int, customer_data: CustomerForm) -> Optional[Customer]:
    data = await client.put(f"customers/{customer_id}", json=customer_data.model_dump(mode="json"))
    return Customer.model_validate(data) if data else None


async def delete(client: ApiClient, customer_id: int) -> None:
    await client.delete(f"customers/{customer_id}")
