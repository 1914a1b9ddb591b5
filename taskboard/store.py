"""
Task board card store (in-memory).

Owns every Card on the board and hands out CardSnapshot values only.
Each operation holds a single lock for its whole duration so the store
is safe under a threaded server.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import NotFound, ValidationError
from .schema import Card, CardSnapshot, CardStatus, CardUpdate, utc_now

logger = logging.getLogger(__name__)

EXAMPLE_CARDS: Tuple[Tuple[str, str, CardStatus], ...] = (
    ("Example task 1", "This is an example task description", CardStatus.TODO),
    ("Example task 2", "This is another example task", CardStatus.IN_PROGRESS),
    ("Example task 3", "A finished example task", CardStatus.DONE),
)


@dataclass(frozen=True)
class BoardListing:
    """Result of list_cards(): the flat list plus one bucket per column."""
    cards: Tuple[CardSnapshot, ...]
    grouped: Mapping[CardStatus, Tuple[CardSnapshot, ...]]

    @property
    def total(self) -> int:
        return len(self.cards)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cards": [c.to_dict() for c in self.cards],
            "grouped": {
                status.value: [c.to_dict() for c in self.grouped[status]]
                for status in CardStatus
            },
            "total": self.total,
        }


class CardStore:
    """In-memory store for task board cards."""

    def __init__(self, seed: bool = False, clock: Callable[[], datetime] = utc_now):
        """Create an empty store, optionally loaded with example cards."""
        self._cards: List[Card] = []
        self._lock = threading.Lock()
        self._clock = clock
        if seed:
            for title, description, status in EXAMPLE_CARDS:
                self.create(title, description, status)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cards)

    def _find(self, card_id: str) -> Card:
        for card in self._cards:
            if card.id == card_id:
                return card
        raise NotFound(card_id)

    # ── queries ─────────────────────────────────────────────────────────────

    def list_cards(self, status: Union[CardStatus, str, None] = None) -> BoardListing:
        """
        List cards in insertion order, grouped by column.

        An empty or unrecognized status filter is ignored rather than
        rejected, so the full board is returned.
        """
        wanted = CardStatus.lookup(status) if status else None
        with self._lock:
            matching = tuple(
                card.to_external() for card in self._cards
                if wanted is None or card.status == wanted
            )
        grouped = {
            s: tuple(c for c in matching if c.status == s)
            for s in CardStatus
        }
        return BoardListing(cards=matching, grouped=grouped)

    def get(self, card_id: str) -> CardSnapshot:
        with self._lock:
            return self._find(card_id).to_external()

    # ── mutations ───────────────────────────────────────────────────────────

    def create(
        self,
        title: Any,
        description: Optional[str] = None,
        status: Union[CardStatus, str, None] = None,
    ) -> CardSnapshot:
        """Create, validate and append a card. Raises ValidationError."""
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Card title must not be empty")
        with self._lock:
            card = Card.new(title, description or "", status or None, now=self._clock())
            card.validate()
            self._cards.append(card)
            snapshot = card.to_external()
        logger.info(f"Created card {card.id} in {card.status.value}")
        return snapshot

    def update(
        self,
        card_id: str,
        changes: Union[CardUpdate, Mapping[str, Any]],
    ) -> CardSnapshot:
        """
        Apply allow-listed field changes to a card.

        Raises NotFound if the id is unknown and ValidationError if the
        resulting card would be invalid; in that case nothing changes.
        """
        with self._lock:
            card = self._find(card_id)
            if not isinstance(changes, CardUpdate):
                changes = CardUpdate.from_mapping(changes)
            card.apply_update(changes, now=self._clock())
            snapshot = card.to_external()
        if changes.is_empty():
            logger.info(f"Touched card {card_id} (no field changes)")
        else:
            logger.info(f"Updated card {card_id}")
        return snapshot

    def delete(self, card_id: str) -> CardSnapshot:
        with self._lock:
            card = self._find(card_id)
            self._cards.remove(card)
        logger.info(f"Deleted card {card_id}")
        return card.to_external()

    def batch_update_status(self, updates: Any) -> List[CardSnapshot]:
        """
        Move many cards between columns in one call (drag and drop).

        Accepts a sequence of {"id", "status"} mappings or (id, status)
        pairs. Pairs naming an unknown card or an invalid status are
        skipped; only a malformed overall input raises ValidationError.
        Returns snapshots of the updated cards in input order.
        """
        pairs = _coerce_pairs(updates)
        updated: List[CardSnapshot] = []
        with self._lock:
            for card_id, raw_status in pairs:
                status = CardStatus.lookup(raw_status)
                if status is None:
                    logger.debug(f"Skipping {card_id}: invalid status {raw_status!r}")
                    continue
                try:
                    card = self._find(card_id)
                except NotFound:
                    logger.debug(f"Skipping {card_id}: card not found")
                    continue
                card.apply_update(CardUpdate(status=status), now=self._clock())
                updated.append(card.to_external())
        logger.info(f"Batch status update: {len(updated)}/{len(pairs)} cards updated")
        return updated


def _coerce_pairs(updates: Any) -> List[Tuple[Any, Any]]:
    """Normalize batch input to (id, status) tuples, or raise ValidationError."""
    if not isinstance(updates, (list, tuple)):
        raise ValidationError("updates must be a list")
    pairs: List[Tuple[Any, Any]] = []
    for item in updates:
        if isinstance(item, Mapping):
            pairs.append((item.get("id"), item.get("status")))
        elif isinstance(item, Sequence) and not isinstance(item, (str, bytes)) and len(item) == 2:
            pairs.append((item[0], item[1]))
        else:
            raise ValidationError("Each update must be an {id, status} pair")
    return pairs
