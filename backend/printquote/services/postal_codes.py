"""Brazilian postal code (CEP) lookup with a fallback provider."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ..context import AppContext
from ..errors import InvalidInput, UpstreamUnavailable
from ..security import digits_only

logger = logging.getLogger("printquote.postal_codes")

CEP_LENGTH = 8


class ProviderError(Exception):
    """A provider answered with something other than an address."""


def normalize_cep(raw: str) -> str:
    cep = digits_only(raw)
    if len(cep) != CEP_LENGTH:
        raise InvalidInput("Postal code must have 8 digits")
    return cep


def _from_brasilapi(data: dict[str, Any], cep: str) -> dict[str, str]:
    return {
        "logradouro": data.get("street") or "",
        "bairro": data.get("neighborhood") or "",
        "localidade": data.get("city") or "",
        "uf": data.get("state") or "",
        "cep": data.get("cep") or cep,
    }


def _from_viacep(data: dict[str, Any], cep: str) -> dict[str, str]:
    if data.get("erro") in (True, "true"):
        raise ProviderError("postal code not found")
    return {
        "logradouro": data.get("logradouro") or "",
        "bairro": data.get("bairro") or "",
        "localidade": data.get("localidade") or "",
        "uf": data.get("uf") or "",
        "cep": digits_only(data.get("cep")) or cep,
    }


async def _fetch(client: httpx.AsyncClient, url: str) -> dict[str, Any]:
    response = await client.get(url)
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, dict):
        raise ProviderError("unexpected payload")
    return data


async def lookup_postal_code(raw_cep: str, context: AppContext) -> dict[str, str]:
    """Resolve a CEP to ``{logradouro, bairro, localidade, uf, cep}``.

    The primary provider is tried first; any network error, non-2xx answer
    or unusable body moves on to the fallback. Raises
    ``UpstreamUnavailable`` when neither provider answers.
    """

    cep = normalize_cep(raw_cep)
    settings = context.settings
    providers = (
        ("primary", settings.postal_code_primary_url, _from_brasilapi),
        ("fallback", settings.postal_code_fallback_url, _from_viacep),
    )

    async with httpx.AsyncClient(
        transport=context.http_transport,
        timeout=settings.postal_code_timeout_seconds,
    ) as client:
        for label, template, normalize in providers:
            try:
                data = await _fetch(client, template.format(cep=cep))
                return normalize(data, cep)
            except (httpx.HTTPError, ValueError, ProviderError) as exc:
                logger.warning("Postal code %s: %s provider failed (%s)", cep, label, exc)

    raise UpstreamUnavailable("Postal code lookup failed")
