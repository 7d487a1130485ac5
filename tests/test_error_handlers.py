from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.village_nav.core.error_catalog import AppError, ErrorCatalog
from app.village_nav.core.errors import setup_exception_handlers


def _app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/app-error")
    def app_error():
        raise AppError(ErrorCatalog.NAV_NETWORK_ERROR, details={"upstream": "config"})

    @app.get("/http-error")
    def http_error():
        raise HTTPException(status_code=404, detail="missing")

    @app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    return app


def test_app_error_uses_catalog_definition():
    with TestClient(_app()) as client:
        response = client.get("/app-error")
    assert response.status_code == 503
    assert response.json() == {
        "code": "NAV_NETWORK_ERROR",
        "message": "Network error loading navigation",
        "details": {"upstream": "config"},
        "trace_id": "",
    }


def test_http_exception_is_wrapped():
    with TestClient(_app()) as client:
        response = client.get("/http-error")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
    assert response.json()["message"] == "missing"


def test_unhandled_exception_returns_internal_error():
    with TestClient(_app(), raise_server_exceptions=False) as client:
        response = client.get("/boom")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    assert response.json()["details"] == {"type": "RuntimeError"}


def test_validation_error_keeps_parameter_named_like_location():
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/lookup")
    def lookup(path: str, depth: int = 1):
        return {"path": path, "depth": depth}

    with TestClient(app) as client:
        missing = client.get("/lookup")
        bad_depth = client.get("/lookup", params={"path": "/x", "depth": "deep"})

    assert missing.status_code == 422
    assert missing.json()["details"]["errors"][0]["field"] == "path"
    assert missing.json()["details"]["errors"][0]["loc"] == ["query", "path"]
    assert bad_depth.json()["details"]["errors"][0]["field"] == "depth"
