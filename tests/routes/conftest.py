import pytest
from fastapi.testclient import TestClient

from courtside.main import app
from courtside.api.dependencies import get_db
from courtside.services.auth_service import get_current_user


@pytest.fixture
def acting_as():
    """Holder for the user the overridden auth dependency returns."""
    return {"user": None}


@pytest.fixture
def client(db, acting_as):
    def override_get_db():
        yield db

    def override_get_current_user():
        return acting_as["user"]

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
