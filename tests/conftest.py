import importlib
import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")


def _setup_app():
    import app.village_nav.core.config as config
    import app.main as main

    importlib.reload(config)
    importlib.reload(main)

    return main.create_app()


@pytest.fixture()
def app():
    return _setup_app()


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def auth_headers():
    from app.village_nav.core.security import create_access_token

    def _headers(role: str, permissions: list[str] | None = None, *, sub: str = "user-1", tenant_id: str = "village-1"):
        claims = {"sub": sub, "tenant_id": tenant_id, "role": role}
        if permissions is not None:
            claims["permissions"] = permissions
        return {"Authorization": f"Bearer {create_access_token(claims)}"}

    return _headers
