"""Tests for the postal code lookup proxy."""
import httpx
import pytest
from httpx import AsyncClient

BRASILAPI_BODY = {
    "cep": "01310100",
    "state": "SP",
    "city": "São Paulo",
    "neighborhood": "Bela Vista",
    "street": "Avenida Paulista",
    "service": "open-cep",
}

VIACEP_BODY = {
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "complemento": "de 612 a 1510 - lado par",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
}

EXPECTED = {
    "logradouro": "Avenida Paulista",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
    "cep": "01310100",
}


@pytest.mark.asyncio
async def test_primary_provider_answer_is_normalised(master: AsyncClient, upstream) -> None:
    upstream.handler = lambda request: httpx.Response(200, json=BRASILAPI_BODY)

    response = await master.get("/api/cep/01310-100")

    assert response.status_code == 200
    assert response.json() == EXPECTED
    assert len(upstream.requests) == 1
    assert upstream.requests[0].url.host == "brasilapi.com.br"
    assert upstream.requests[0].url.path.endswith("/01310100")


@pytest.mark.asyncio
async def test_fallback_is_used_when_primary_fails(master: AsyncClient, upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "brasilapi.com.br":
            return httpx.Response(500)
        return httpx.Response(200, json=VIACEP_BODY)

    upstream.handler = handler

    response = await master.get("/api/cep/01310100")

    assert response.status_code == 200
    assert response.json() == EXPECTED
    assert [r.url.host for r in upstream.requests] == ["brasilapi.com.br", "viacep.com.br"]


@pytest.mark.asyncio
async def test_network_error_on_primary_falls_back(master: AsyncClient, upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "brasilapi.com.br":
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, json=VIACEP_BODY)

    upstream.handler = handler

    response = await master.get("/api/cep/01310100")

    assert response.json()["localidade"] == "São Paulo"


@pytest.mark.asyncio
async def test_both_providers_failing_is_a_server_error(master: AsyncClient, upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "brasilapi.com.br":
            return httpx.Response(404, json={"message": "CEP não encontrado"})
        return httpx.Response(200, json={"erro": True})

    upstream.handler = handler

    response = await master.get("/api/cep/99999999")

    assert response.status_code == 500
    assert response.json() == {"message": "Postal code lookup failed"}


@pytest.mark.asyncio
async def test_malformed_postal_code_is_rejected(master: AsyncClient, upstream) -> None:
    response = await master.get("/api/cep/123")

    assert response.status_code == 400
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_lookup_requires_login(make_client) -> None:
    client = await make_client()

    assert (await client.get("/api/cep/01310100")).status_code == 401
