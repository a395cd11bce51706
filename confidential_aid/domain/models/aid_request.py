"""Aid request domain model.

An AidRequest mirrors one record stored on the ledger. The amount itself
never appears here: the ledger holds it as ciphertext, addressed by the
record id, and only exposes the cleartext through revealed_value after a
decrypt-and-verify round has been accepted.

Invariants:
- id is immutable and unique across the record set
- verified is monotonic (False -> True, never back)
- revealed_value is only trustworthy when verified is True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping


class RequestCategory(IntEnum):
    """Public record type selector.

    Values:
        DONATION: Member offers support.
        ASSISTANCE: Member asks for support.
    """

    DONATION = 1
    ASSISTANCE = 2


def coerce_int(value: Any) -> int:
    """Normalise a ledger numeric field, treating junk as zero.

    Args:
        value: Raw value from the ledger (int, numeric string, None, ...).

    Returns:
        The integer value, or 0 if it cannot be interpreted.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else 0
    text = str(value).strip()
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    except ValueError:
        return 0


@dataclass(frozen=True, eq=True)
class AidRequest:
    """An encrypted aid request as stored on the ledger.

    Attributes:
        id: Creator-generated unique identifier.
        title: Public title.
        description: Public description (the purpose label set at creation).
        category: Public category selector.
        creator: Identity of the submitting wallet.
        created_at: Ledger timestamp in seconds.
        secondary_value: Public secondary slot (zero at creation).
        verified: Whether decrypt-and-verify has been accepted.
        revealed_value: Ledger-confirmed cleartext, zero until verified.
    """

    id: str
    title: str
    description: str
    category: int
    creator: str
    created_at: int = field(default=0)
    secondary_value: int = field(default=0)
    verified: bool = field(default=False)
    revealed_value: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate aid request fields."""
        if not self.id:
            raise ValueError("Aid request id must not be empty")

    @property
    def encrypted_value_ref(self) -> str:
        """Handle used to look up this record's ciphertext (the record id)."""
        return self.id

    @property
    def confirmed_value(self) -> int | None:
        """Ledger-confirmed amount, or None while unverified."""
        return self.revealed_value if self.verified else None

    def is_created_by(self, identity: str | None) -> bool:
        """Check authorship with case-insensitive identity comparison.

        Args:
            identity: Wallet identity to compare, or None.

        Returns:
            True if identity is set and matches the creator.
        """
        if not identity:
            return False
        return self.creator.lower() == identity.lower()

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match over title and description."""
        needle = term.lower()
        return needle in self.title.lower() or needle in self.description.lower()

    @classmethod
    def from_ledger(cls, record_id: str, data: Mapping[str, Any]) -> AidRequest:
        """Build an AidRequest from a raw ledger record.

        Numeric slots that are missing or malformed become zero, matching
        how the ledger reports unset fields.

        Args:
            record_id: The id the record was fetched under.
            data: Raw field mapping returned by the ledger.

        Returns:
            Normalised AidRequest.
        """
        return cls(
            id=record_id,
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            category=coerce_int(data.get("category")),
            creator=str(data.get("creator") or ""),
            created_at=coerce_int(data.get("created_at")),
            secondary_value=coerce_int(data.get("secondary_value")),
            verified=bool(data.get("verified", False)),
            revealed_value=coerce_int(data.get("revealed_value")),
        )
