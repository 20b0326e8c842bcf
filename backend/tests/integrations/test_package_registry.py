import httpx
import pytest

from portfolio.integrations.package_registry import (
    DESCRIPTION_UNAVAILABLE,
    NO_DESCRIPTION,
    PackageRegistryClient,
)


def _pypi(request: httpx.Request) -> httpx.Response:
    name = request.url.path.split("/")[2]
    if name == "fastapi":
        return httpx.Response(200, json={"info": {"summary": "FastAPI framework"}})
    if name == "blank":
        return httpx.Response(200, json={"info": {"summary": ""}})
    if name == "flaky":
        raise httpx.ConnectTimeout("timed out", request=request)
    return httpx.Response(404)


@pytest.mark.asyncio
async def test_pypi_descriptions():
    client = PackageRegistryClient("pip", batch_size=2, transport=httpx.MockTransport(_pypi))

    result = await client.fetch_descriptions(["fastapi", "blank", "flaky", "ghost"])

    assert result == {
        "fastapi": "FastAPI framework",
        "blank": NO_DESCRIPTION,
        "flaky": DESCRIPTION_UNAVAILABLE,
    }


@pytest.mark.asyncio
async def test_npm_descriptions_use_registry_url():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"description": "The React Framework"})

    client = PackageRegistryClient("npm", transport=httpx.MockTransport(handler))

    assert await client.fetch_descriptions(["next"]) == {"next": "The React Framework"}
    assert seen == ["https://registry.npmjs.org/next"]


def test_unknown_ecosystem():
    with pytest.raises(ValueError):
        PackageRegistryClient("cargo")
