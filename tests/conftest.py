"""Shared test fixtures and configuration."""
import pytest
from pathlib import Path
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import Settings
from app.core.dependencies import build_app_session, get_app_session
from app.services.cart.store import CartStore
from app.services.catalog.in_memory import InMemoryGateway
from app.services.catalog.models import Dish
from app.services.catalog.repository import CatalogRepository
from app.services.ordering.workflow import OrderWorkflow


@pytest.fixture
def test_catalog_path():
    """Return path to test catalog YAML file."""
    return Path(__file__).parent / "fixtures" / "test_catalog.yaml"


@pytest.fixture
def test_settings(test_catalog_path):
    """Settings pointing at the in-memory gateway."""
    return Settings(
        use_in_memory_gateway=True,
        catalog_file=str(test_catalog_path),
        catalog_page_size=2,
    )


@pytest.fixture
def gateway(test_catalog_path):
    """In-memory gateway loaded with the test catalog."""
    return InMemoryGateway(catalog_file=str(test_catalog_path))


@pytest.fixture
def make_dish():
    """Factory for dishes with sensible defaults."""
    def _make_dish(dish_id="D1", price="100.00", name=None, cuisine_id="10", rating=None):
        return Dish(
            id=dish_id,
            name=name or f"Dish {dish_id}",
            price=price,
            rating=rating,
            cuisine_id=cuisine_id,
        )
    return _make_dish


@pytest.fixture
def cart_store():
    """Empty cart store with default tax rates."""
    return CartStore()


@pytest.fixture
def order_workflow(cart_store, gateway):
    """Order workflow over the test cart and in-memory gateway."""
    return OrderWorkflow(cart_store, gateway)


@pytest.fixture
def catalog_repository(gateway):
    """Catalog repository paging two cuisines at a time."""
    return CatalogRepository(gateway, page_size=2)


@pytest.fixture
def app_session(test_settings, gateway):
    """Application session wired around the in-memory gateway."""
    return build_app_session(test_settings, gateway=gateway)


@pytest.fixture
def test_client(app_session):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_app_session] = lambda: app_session

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()
