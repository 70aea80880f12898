"""External identity provider: email/password accounts owned by a third party."""

from abc import ABC, abstractmethod
from functools import lru_cache

from pydantic import BaseModel

from app.core.config import get_settings

MIN_PASSWORD_LENGTH = 6


class IdentityUser(BaseModel):
    uid: str
    email: str


class IdentityProvider(ABC):
    @abstractmethod
    async def sign_up(self, email: str, password: str) -> IdentityUser:
        """Create the account and return its provider uid."""
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> IdentityUser:
        ...

    @abstractmethod
    async def send_password_reset(self, email: str) -> None:
        ...


@lru_cache
def get_identity_provider() -> IdentityProvider:
    settings = get_settings()
    if settings.identity_backend == "firebase":
        from app.identity.firebase import FirebaseIdentityProvider
        return FirebaseIdentityProvider(settings.firebase_api_key, settings.firebase_auth_url)
    from app.identity.local import LocalIdentityProvider
    return LocalIdentityProvider()
