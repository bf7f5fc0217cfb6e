from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from storefront import config, models, schemas
from storefront.main import app, get_services
from storefront.services import memory_services, sql_services


@pytest.fixture(scope="function", params=["memory", "sql"])
def services(request) -> Generator:
    # Fresh, unseeded stores; SQL runs on in-memory SQLite with a single connection
    if request.param == "memory":
        svc = memory_services()
    else:
        svc = sql_services("sqlite://")
    try:
        yield svc
    finally:
        svc.close()


@pytest.fixture(scope="function")
def client(services):
    # Override dependency to use the same services
    previous = config.get_state()
    config.set_state(storage="memory", seed=False)
    app.dependency_overrides[get_services] = lambda: services
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    config.set_state(**previous._asdict())


@pytest.fixture
def electronics(services):
    return services.catalog.create_category(schemas.CategoryCreate(name="Electronics", slug="electronics"))


@pytest.fixture
def watch(services, electronics):
    return services.catalog.create_product(
        schemas.ProductCreate(
            name="Smart Watch Pro",
            description="Advanced smartwatch with health monitoring",
            price=Decimal("199.99"),
            image_url="https://example.com/watch.jpg",
            category_id=electronics.id,
            brand="SmartGear",
        )
    )


def make_user(services, username: str, password: str = "secret1", is_admin: bool = False):
    return services.identity.create_user(
        schemas.UserCreate(username=username, password=password, email=f"{username}@example.com"),
        is_admin=is_admin,
    )


def stored_item_count(services) -> int:
    """Order items actually held by the backend, read past the repository."""
    if services.engine is None:
        return sum(len(rows) for rows in services.orders.orders._items.values())
    with Session(services.engine) as db:
        return db.query(models.OrderItem).count()


def login(client, username: str, password: str = "secret1") -> dict:
    r = client.post("/api/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def user_headers(client, services):
    make_user(services, "shopper")
    return login(client, "shopper")


@pytest.fixture
def admin_headers(client, services):
    make_user(services, "boss", password="bosspass", is_admin=True)
    return login(client, "boss", "bosspass")
