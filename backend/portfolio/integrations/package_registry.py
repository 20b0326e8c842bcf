"""Package description lookups against PyPI and the npm registry."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List

import httpx

from ..core.constants import REGISTRY_BATCH_SIZE

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"
DESCRIPTION_UNAVAILABLE = "Description unavailable"

REGISTRY_URLS = {
    "pip": "https://pypi.org/pypi/{name}/json",
    "npm": "https://registry.npmjs.org/{name}",
}


def _batches(names: List[str], size: int) -> Iterable[List[str]]:
    for start in range(0, len(names), size):
        yield names[start : start + size]


def _extract_description(ecosystem: str, payload: dict) -> str:
    if ecosystem == "pip":
        info = payload.get("info") or {}
        return str(info.get("summary") or "") or NO_DESCRIPTION
    return str(payload.get("description") or "") or NO_DESCRIPTION


class PackageRegistryClient:
    def __init__(
        self,
        ecosystem: str,
        *,
        timeout: float = 10.0,
        batch_size: int = REGISTRY_BATCH_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if ecosystem not in REGISTRY_URLS:
            raise ValueError(f"Unsupported package ecosystem: {ecosystem}")
        self.ecosystem = ecosystem
        self._url_template = REGISTRY_URLS[ecosystem]
        self._timeout = timeout
        self._batch_size = batch_size
        self._transport = transport

    async def _fetch_one(self, client: httpx.AsyncClient, name: str) -> tuple[str, str | None]:
        try:
            response = await client.get(self._url_template.format(name=name))
        except httpx.RequestError as exc:
            logger.warning(
                "Registry lookup failed",
                extra={"evt": "registry_lookup_failed", "package": name, "error": str(exc)},
            )
            return name, DESCRIPTION_UNAVAILABLE
        if response.status_code != 200:
            return name, None
        return name, _extract_description(self.ecosystem, response.json())

    async def fetch_descriptions(self, names: List[str]) -> Dict[str, str]:
        """
        Descriptions keyed by package name.

        Requests go out ``batch_size`` at a time. Packages the registry does not
        know are left out of the result.
        """
        descriptions: Dict[str, str] = {}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            for batch in _batches(list(names), self._batch_size):
                results = await asyncio.gather(*(self._fetch_one(client, name) for name in batch))
                for name, description in results:
                    if description is not None:
                        descriptions[name] = description
        return descriptions
