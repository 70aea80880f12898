import httpx
import pytest

from app.core.exceptions import ConflictError, UnauthorizedError, UpstreamError, ValidationError
from app.identity.firebase import FirebaseIdentityProvider, map_firebase_error

pytestmark = pytest.mark.asyncio


async def test_local_sign_up_and_sign_in(identity):
    user = await identity.sign_up("a@example.com", "secret1")
    again = await identity.sign_in("a@example.com", "secret1")
    assert again.uid == user.uid


async def test_local_rejects_bad_credentials(identity):
    await identity.sign_up("a@example.com", "secret1")
    with pytest.raises(ConflictError):
        await identity.sign_up("a@example.com", "another1")
    with pytest.raises(UnauthorizedError):
        await identity.sign_in("a@example.com", "wrong-pass")
    with pytest.raises(UnauthorizedError):
        await identity.sign_in("nobody@example.com", "secret1")
    with pytest.raises(ValidationError):
        await identity.sign_up("b@example.com", "123")


@pytest.mark.parametrize(
    "message,expected",
    [
        ("EMAIL_EXISTS", ConflictError),
        ("INVALID_LOGIN_CREDENTIALS", UnauthorizedError),
        ("WEAK_PASSWORD : Password should be at least 6 characters", ValidationError),
        ("TOO_MANY_ATTEMPTS_TRY_LATER", UpstreamError),
    ],
)
async def test_map_firebase_error(message, expected):
    assert isinstance(map_firebase_error(message), expected)


async def test_firebase_sign_in_posts_to_identity_toolkit():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"localId": "uid-1", "email": "a@example.com", "idToken": "t"})

    provider = FirebaseIdentityProvider("key", "https://identity.test/v1", transport=httpx.MockTransport(handler))
    user = await provider.sign_in("a@example.com", "secret1")

    assert user.uid == "uid-1"
    assert seen[0].url.path == "/v1/accounts:signInWithPassword"
    assert seen[0].url.params["key"] == "key"


async def test_firebase_error_is_mapped():
    def handler(request):
        return httpx.Response(400, json={"error": {"code": 400, "message": "EMAIL_EXISTS"}})

    provider = FirebaseIdentityProvider("key", "https://identity.test/v1", transport=httpx.MockTransport(handler))
    with pytest.raises(ConflictError):
        await provider.sign_up("a@example.com", "secret1")


async def test_firebase_without_api_key():
    provider = FirebaseIdentityProvider("", "https://identity.test/v1")
    with pytest.raises(UpstreamError):
        await provider.send_password_reset("a@example.com")
