# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Base Pydantic model configuration for all domain models.

Two families live here:

- ``BaseModelConfig`` for request/response bodies and value objects: frozen,
  strict, whitespace stripped.
- ``LedgerRecord`` for documents persisted on the ledger: frozen, addressed
  by their wire field names, and tolerant of fields written by other
  clients so a read-modify-write never drops them.
"""

import json
from datetime import datetime, timezone
from typing import Any

from beartype import beartype
from pydantic import BaseModel, ConfigDict


@beartype
class BaseModelConfig(BaseModel):
    """Base model with strict configuration for API and value entities.

    Enforces:
    - Immutability (frozen=True)
    - No extra fields allowed (extra="forbid")
    - Validation on assignment
    - Automatic whitespace stripping
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )


class LedgerRecord(BaseModel):
    """Base model for JSON documents stored under a ledger key.

    Attributes use Python names; the wire format uses the aliases. Values
    are echoed exactly, so no whitespace stripping happens here.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
        validate_default=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump with wire field names, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        """Compact JSON text as stored on the ledger."""
        return json.dumps(self.to_wire(), ensure_ascii=False, separators=(",", ":"))

    def to_bytes(self) -> bytes:
        """UTF-8 encoded ledger value."""
        return self.to_json().encode("utf-8")


@beartype
def iso_timestamp(moment: datetime | None = None) -> str:
    """Format a moment as UTC ISO-8601 with millisecond precision.

    Produces ``2024-05-01T12:30:00.123Z``, the format every timestamp on the
    ledger uses.
    """
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
