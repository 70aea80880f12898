import uuid

from app.core.exceptions import ConflictError, UnauthorizedError, ValidationError
from app.core.logging import get_logger
from app.core.security import hash_password, verify_password
from app.identity.base import MIN_PASSWORD_LENGTH, IdentityProvider, IdentityUser

log = get_logger(__name__)


class LocalIdentityProvider(IdentityProvider):
    """In-process accounts for development and tests; nothing survives a restart."""

    def __init__(self) -> None:
        self._users: dict[str, tuple[str, str]] = {}  # email -> (uid, password hash)

    async def sign_up(self, email: str, password: str) -> IdentityUser:
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                details={"field": "password"},
            )
        if email in self._users:
            raise ConflictError("Email already in use")
        uid = uuid.uuid4().hex
        self._users[email] = (uid, hash_password(password))
        return IdentityUser(uid=uid, email=email)

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        entry = self._users.get(email)
        if not entry or not verify_password(password, entry[1]):
            raise UnauthorizedError("Invalid email or password")
        return IdentityUser(uid=entry[0], email=email)

    async def send_password_reset(self, email: str) -> None:
        log.info("password_reset_requested", known=email in self._users)
