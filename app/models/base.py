from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredModel(BaseModel):
    """Pydantic model persisted as one document in an owner's partition."""

    model_config = ConfigDict(populate_by_name=True)

    collection: ClassVar[str]
    indexes: ClassVar[list[list[tuple[str, int]]]] = []

    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        """JSON-safe values (Decimal as str); top-level timestamps stay datetimes."""
        doc = self.model_dump(mode="json", exclude={"id"})
        for name, value in self:
            if isinstance(value, datetime) and name in doc:
                doc[name] = value
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]):
        return cls.model_validate(doc)
