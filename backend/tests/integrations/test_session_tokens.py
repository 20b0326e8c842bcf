import json
import time

from cryptography.hazmat.primitives.asymmetric import rsa
import httpx
import jwt
from jwt.algorithms import RSAAlgorithm
import pytest

from portfolio.auth import JWKSCache, verify_session_token

JWKS_URL = "https://clerk.example.test/.well-known/jwks.json"


@pytest.fixture(scope="module")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def jwks(signing_key):
    public = json.loads(RSAAlgorithm.to_jwk(signing_key.public_key()))
    public["kid"] = "ins_1"
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, json={"keys": [public]})

    return JWKSCache(JWKS_URL, transport=httpx.MockTransport(handler)), calls


def _token(key, *, kid="ins_1", **claims) -> str:
    payload = {"sub": "user_1", "exp": int(time.time()) + 60, "iat": int(time.time())}
    payload.update(claims)
    return jwt.encode(payload, key, algorithm="RS256", headers={"kid": kid})


@pytest.mark.asyncio
async def test_valid_token_returns_claims(signing_key, jwks):
    cache, calls = jwks

    claims = await verify_session_token(_token(signing_key, sid="sess_1"), cache=cache)
    await verify_session_token(_token(signing_key), cache=cache)

    assert claims.sub == "user_1"
    assert claims.sid == "sess_1"
    assert calls == [JWKS_URL]


@pytest.mark.asyncio
async def test_expired_token_rejected(signing_key, jwks):
    cache, _ = jwks
    assert await verify_session_token(_token(signing_key, exp=int(time.time()) - 120), cache=cache) is None


@pytest.mark.asyncio
async def test_unknown_kid_refetches_then_rejects(signing_key, jwks):
    cache, calls = jwks

    assert await verify_session_token(_token(signing_key, kid="rotated"), cache=cache) is None
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_token_signed_by_other_key_rejected(jwks):
    cache, _ = jwks
    other = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    assert await verify_session_token(_token(other), cache=cache) is None


@pytest.mark.asyncio
async def test_garbage_and_empty_tokens(jwks):
    cache, _ = jwks
    assert await verify_session_token("", cache=cache) is None
    assert await verify_session_token("not-a-jwt", cache=cache) is None


@pytest.mark.asyncio
async def test_jwks_outage_rejects(signing_key):
    cache = JWKSCache(JWKS_URL, transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    assert await verify_session_token(_token(signing_key), cache=cache) is None
