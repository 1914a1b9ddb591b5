"""
Task board card schema.

Statuses: {todo, inProgress, inReview, done}

Statuses are a flat set: any status can move directly to any other.
Cards are mutated only through apply_update(), which validates the
proposed state before writing it.
"""
import uuid
from enum import Enum
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Mapping, Union

from .errors import ValidationError


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class CardStatus(Enum):
    """Board columns a card can sit in."""
    TODO = "todo"
    IN_PROGRESS = "inProgress"
    IN_REVIEW = "inReview"
    DONE = "done"

    @classmethod
    def lookup(cls, value: Any) -> Optional["CardStatus"]:
        """Return the member for a wire value, or None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def parse(cls, value: Any) -> "CardStatus":
        status = cls.lookup(value)
        if status is None:
            raise ValidationError(f"Invalid status: {value!r}")
        return status


STATUS_LABELS: Dict[CardStatus, str] = {
    CardStatus.TODO: "To Do",
    CardStatus.IN_PROGRESS: "In Progress",
    CardStatus.IN_REVIEW: "In Review",
    CardStatus.DONE: "Done",
}

UPDATABLE_FIELDS = ("title", "description", "status")


@dataclass(frozen=True)
class CardUpdate:
    """Partial update: None means leave the field unchanged."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[CardStatus] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CardUpdate":
        """Build from a request body, dropping keys outside the allow-list."""
        if not isinstance(data, Mapping):
            raise ValidationError("Update body must be an object")

        # A key that is present counts, even when its value is null
        title = data.get("title")
        if "title" in data and not isinstance(title, str):
            raise ValidationError("Card title must be a string")

        description = data.get("description")
        if "description" in data:
            if description is None:
                description = ""
            elif not isinstance(description, str):
                raise ValidationError("Card description must be a string")

        return cls(
            title=title,
            description=description,
            status=CardStatus.parse(data["status"]) if "status" in data else None,
        )

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in UPDATABLE_FIELDS)


@dataclass(frozen=True)
class CardSnapshot:
    """Detached, read-only view of a card handed across the store boundary."""
    id: str
    title: str
    description: str
    status: CardStatus
    status_label: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape used by the HTTP layer."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "statusLabel": self.status_label,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass
class Card:
    """A single task on the board."""

    # Identifier (never reassigned)
    id: str

    # Content
    title: str
    description: str = ""

    # Workflow
    status: CardStatus = CardStatus.TODO

    # Metadata
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def new(
        cls,
        title: str,
        description: Optional[str] = "",
        status: Union[CardStatus, str, None] = CardStatus.TODO,
        now: Optional[datetime] = None,
    ) -> "Card":
        """
        Construct a card with a fresh id and matching timestamps.

        The title is trimmed but not checked; call validate() before the
        card is stored. An unknown status is rejected here since it
        cannot be represented.
        """
        if not isinstance(title, str):
            raise ValidationError("Card title must be a string")
        if description is not None and not isinstance(description, str):
            raise ValidationError("Card description must be a string")
        now = now or utc_now()
        return cls(
            id=str(uuid.uuid4()),
            title=title.strip(),
            description=description or "",
            status=CardStatus.parse(status) if status is not None else CardStatus.TODO,
            created_at=now,
            updated_at=now,
        )

    def apply_update(self, changes: CardUpdate, now: Optional[datetime] = None) -> "Card":
        """
        Apply a partial update atomically.

        The next state is validated as a whole before any field of this
        card is written, so a rejected update leaves the card unchanged.
        """
        proposed = replace(self)
        if changes.title is not None:
            proposed.title = changes.title.strip()
        if changes.description is not None:
            proposed.description = changes.description
        if changes.status is not None:
            proposed.status = changes.status
        proposed.validate()

        self.title = proposed.title
        self.description = proposed.description
        self.status = proposed.status
        # Clock skew must not move updated_at backwards
        self.updated_at = max(now or utc_now(), self.updated_at)
        return self

    def status_label(self) -> str:
        return STATUS_LABELS[self.status]

    def validate(self) -> None:
        """Raise ValidationError if the card is not fit to be stored."""
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValidationError("Card title must not be empty")
        if not isinstance(self.status, CardStatus):
            raise ValidationError(f"Invalid status: {self.status!r}")

    def to_external(self) -> CardSnapshot:
        return CardSnapshot(
            id=self.id,
            title=self.title,
            description=self.description,
            status=self.status,
            status_label=self.status_label(),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
