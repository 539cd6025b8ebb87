from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError, OperationalError

from property_registry.config import get_settings
from property_registry.exceptions import TransientStoreError
from property_registry.main import create_app


class _Payload(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(gt=0)


def _build_app() -> FastAPI:
    app = create_app()

    @app.get("/boom/transient")
    async def transient() -> None:
        raise TransientStoreError("Temporary database failure")

    @app.get("/boom/driver")
    async def driver() -> None:
        raise OperationalError("SELECT 1", {}, ConnectionError("connection refused"))

    @app.get("/boom/integrity")
    async def integrity() -> None:
        raise IntegrityError("INSERT", {}, Exception("duplicate key value"))

    @app.get("/boom/unexpected")
    async def unexpected() -> None:
        raise RuntimeError("secret internals")

    @app.post("/echo")
    async def echo(payload: _Payload) -> dict[str, str]:
        return {"name": payload.name}

    return app


@pytest.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=_build_app(), raise_app_exceptions=False)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://test"
    ) as test_client:
        yield test_client


@pytest.mark.anyio
async def test_health(client: httpx.AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_transient_failure_is_retryable_server_error(
    client: httpx.AsyncClient,
) -> None:
    response = await client.get("/boom/transient")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["statusCode"] == 500
    assert "retried" in body["message"]
    assert body["data"] is None


@pytest.mark.anyio
async def test_integrity_error_maps_to_conflict(client: httpx.AsyncClient) -> None:
    response = await client.get("/boom/integrity")

    assert response.status_code == 409
    body = response.json()
    assert body["message"] == "The request conflicts with existing data"
    assert body["errors"] is None


@pytest.mark.anyio
async def test_unexpected_error_hides_details_by_default(
    client: httpx.AsyncClient,
) -> None:
    response = await client.get("/boom/unexpected")

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "An unexpected error occurred"
    assert body["errors"] is None
    assert "secret internals" not in response.text


@pytest.mark.anyio
async def test_unexpected_error_details_can_be_exposed(
    client: httpx.AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("EXPOSE_ERROR_DETAILS", "true")
    get_settings.cache_clear()

    response = await client.get("/boom/unexpected")

    assert response.status_code == 500
    assert response.json()["errors"] == ["RuntimeError: secret internals"]


@pytest.mark.anyio
async def test_validation_error_envelope(client: httpx.AsyncClient) -> None:
    response = await client.post("/echo", json={"name": "", "price": -1})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert len(body["errors"]) == 2
    assert any(error.startswith("name:") for error in body["errors"])
    assert any(error.startswith("price:") for error in body["errors"])


@pytest.mark.anyio
async def test_raw_driver_outage_is_reported_as_retryable(
    client: httpx.AsyncClient,
) -> None:
    response = await client.get("/boom/driver")

    assert response.status_code == 500
    body = response.json()
    assert "retried" in body["message"]
    assert body["message"] != "An unexpected error occurred"
