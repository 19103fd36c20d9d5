"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- An in-memory fake of the scheduling backend (served via httpx.MockTransport)
- FastAPI test client wired to the fake backend
- A signed-in test client
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from hvac_console.core.deps import get_http_client
from hvac_console.services.api_client import create_http_client
from main import app

BACKEND_ROOT = "http://backend.test"
API_ROOT = f"{BACKEND_ROOT}/api/v1"
TOKEN_SECRET = "test-secret"


def make_token(user_id: int, expires_in: timedelta = timedelta(hours=24)) -> str:
    """JWT shaped like the backend's tokens."""
    expire = datetime.now(timezone.utc) + expires_in
    return jwt.encode({"user_id": user_id, "exp": int(expire.timestamp())}, TOKEN_SECRET, algorithm="HS256")


def _json(status_code: int, body=None) -> httpx.Response:
    if body is None:
        return httpx.Response(status_code)
    return httpx.Response(status_code, json=body)


class FakeBackend:
    """
    Minimal in-memory stand-in for the REST backend.

    Records every request in `requests`. Set `fail` to a set of
    (method, resource) pairs to make those calls answer 500, and
    `expired` to make every protected call answer 401.
    """

    def __init__(self):
        self.users = {}
        self.passwords = {}
        self.tokens = {}
        self.customers = {}
        self.technicians = {}
        self.jobs = {}
        self.requests = []
        self.fail = set()
        self.expired = False
        self.healthy = True
        self._next_id = 100

    # Seeding helpers

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def add_user(self, email: str, password: str, company_name: str = "Cool Air LLC") -> dict:
        user = {"id": self.next_id(), "email": email, "company_name": company_name, "industry": "hvac"}
        self.users[email] = user
        self.passwords[email] = password
        return user

    def issue_token(self, user: dict) -> str:
        token = make_token(user["id"])
        self.tokens[token] = user
        return token

    def add_customer(self, **fields) -> dict:
        customer = {"id": self.next_id(), "email": "", "notes": "", **fields}
        self.customers[customer["id"]] = customer
        return customer

    def add_technician(self, **fields) -> dict:
        technician = {"id": self.next_id(), "email": "", "is_active": True, **fields}
        self.technicians[technician["id"]] = technician
        return technician

    def add_job(self, **fields) -> dict:
        job = {
            "id": self.next_id(),
            "technician_id": None,
            "description": "",
            "duration_minutes": 60,
            "price": None,
            "status": "scheduled",
            **fields,
        }
        self.jobs[job["id"]] = job
        return job

    def _job_view(self, job: dict) -> dict:
        view = dict(job)
        view["customer"] = self.customers.get(job["customer_id"])
        return view

    # Request inspection

    def calls(self, method: str, path: str) -> list:
        return [r for r in self.requests if r["method"] == method and r["path"] == path]

    # Transport handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append({
            "method": request.method,
            "path": path,
            "params": dict(request.url.params),
            "json": body,
            "authorization": request.headers.get("Authorization"),
        })

        if path == "/health":
            return _json(200 if self.healthy else 503, {"status": "ok" if self.healthy else "unhealthy"})

        if not path.startswith("/api/v1/"):
            return _json(404, {"error": "Not found"})

        parts = path[len("/api/v1/"):].strip("/").split("/")
        resource = parts[0]

        if (request.method, resource) in self.fail:
            return _json(500, {"error": f"Failed to handle {resource}"})

        if resource == "register":
            return self._register(body)
        if resource == "login":
            return self._login(body)

        auth = request.headers.get("Authorization", "")
        token = auth[len("Bearer "):] if auth.startswith("Bearer ") else None
        if self.expired or token not in self.tokens:
            return _json(401, {"error": "Invalid or expired token"})

        if resource == "me":
            return _json(200, self.tokens[token])

        handler = {
            "customers": self._customers,
            "technicians": self._technicians,
            "jobs": self._jobs,
        }.get(resource)
        if handler is None:
            return _json(404, {"error": "Not found"})
        return handler(request, parts[1:], body)

    def _register(self, body):
        if body["email"] in self.users:
            return _json(409, {"error": "Email already registered"})
        user = self.add_user(body["email"], body["password"], body["company_name"])
        return _json(201, {"token": self.issue_token(user), "user": user})

    def _login(self, body):
        email = body.get("email", "").lower()
        if self.passwords.get(email) != body.get("password"):
            return _json(401, {"error": "Invalid email or password"})
        user = self.users[email]
        return _json(200, {"token": self.issue_token(user), "user": user})

    def _crud(self, request, parts, body, store, view=lambda item: item):
        if not parts:
            if request.method == "POST":
                item = {"id": self.next_id(), **body}
                store[item["id"]] = item
                return _json(201, view(item))
            return None

        item_id = int(parts[0])
        if item_id not in store:
            return _json(404, {"error": "Not found"})

        if request.method == "GET":
            return _json(200, view(store[item_id]))
        if request.method == "PUT":
            store[item_id].update(body)
            return _json(200, view(store[item_id]))
        if request.method == "DELETE":
            del store[item_id]
            return _json(200, {"message": "Deleted successfully"})
        return _json(405, {"error": "Method not allowed"})

    def _customers(self, request, parts, body):
        if not parts and request.method == "GET":
            search = request.url.params.get("search", "").lower()
            items = [
                c for c in self.customers.values()
                if not search or search in c["name"].lower() or search in c["phone"]
            ]
            return _json(200, items)
        return self._crud(request, parts, body, self.customers)

    def _technicians(self, request, parts, body):
        if not parts and request.method == "GET":
            active_only = request.url.params.get("active_only") == "true"
            items = [t for t in self.technicians.values() if t["is_active"] or not active_only]
            return _json(200, items)
        return self._crud(request, parts, body, self.technicians)

    def _jobs(self, request, parts, body):
        if not parts and request.method == "GET":
            status_filter = request.url.params.get("status")
            items = [
                self._job_view(j) for j in self.jobs.values()
                if not status_filter or j["status"] == status_filter
            ]
            return _json(200, items or None)

        if not parts and request.method == "POST":
            body = {"status": "scheduled", **body}

        if len(parts) == 2 and request.method == "PATCH":
            job = self.jobs.get(int(parts[0]))
            if job is None:
                return _json(404, {"error": "Job not found"})
            if parts[1] == "assign":
                job["technician_id"] = body["technician_id"]
                return _json(200, {"message": "Technician assigned successfully"})
            if parts[1] == "status":
                if body["status"] not in ("scheduled", "in_progress", "completed", "cancelled"):
                    return _json(400, {"error": "Invalid status"})
                job["status"] = body["status"]
                return _json(200, {"message": "Status updated successfully"})

        return self._crud(request, parts, body, self.jobs, view=self._job_view)


@pytest.fixture
def backend():
    """
    Fake backend seeded with one account, two customers, two technicians
    (one inactive) and three jobs.
    """
    fake = FakeBackend()
    fake.add_user("owner@coolair.com", "secret123")

    today_noon = datetime.now().astimezone().replace(hour=12, minute=0, second=0, microsecond=0)

    smith = fake.add_customer(name="Jane Smith", phone="555-0100", address="12 Elm St", email="jane@example.com")
    jones = fake.add_customer(name="Bob Jones", phone="555-0200", address="9 Oak Ave", notes="Gate code 1234")

    fake.add_technician(name="Mike Tech", phone="555-1000")
    fake.add_technician(name="Retired Ray", phone="555-2000", is_active=False)

    fake.add_job(
        customer_id=smith["id"],
        title="AC Repair",
        description="Unit not cooling properly",
        scheduled_at=today_noon.isoformat(),
        price=150.0,
    )
    fake.add_job(
        customer_id=jones["id"],
        title="Furnace Tune-up",
        scheduled_at=(today_noon + timedelta(days=3)).isoformat(),
        status="in_progress",
    )
    fake.add_job(
        customer_id=jones["id"],
        title="Duct Cleaning",
        scheduled_at=(today_noon - timedelta(days=7)).isoformat(),
        status="completed",
    )
    return fake


@pytest.fixture
def http_client(backend):
    """Shared AsyncClient routed to the fake backend."""
    return create_http_client(base_url=API_ROOT, transport=httpx.MockTransport(backend.handle))


@pytest.fixture
def client(http_client):
    """
    FastAPI test client with the backend HTTP client overridden.
    """
    app.dependency_overrides[get_http_client] = lambda: http_client

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    """Test client that has signed in as the seeded account."""
    response = client.post(
        "/login",
        data={"email": "owner@coolair.com", "password": "secret123"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client


@pytest.fixture
def seeded_ids(backend):
    """Ids of the seeded records, by name/title."""
    return {
        **{c["name"]: c["id"] for c in backend.customers.values()},
        **{t["name"]: t["id"] for t in backend.technicians.values()},
        **{j["title"]: j["id"] for j in backend.jobs.values()},
    }
