from datetime import datetime

from pydantic import Field

from app.models.base import StoredModel, utcnow


class Profile(StoredModel):
    """One per owner, stored in the owner's own partition under id == owner_id."""

    email: str
    session_version: int = 0
    last_login_at: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)

    collection = "profile"
