# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Projection models for the per-key modification history."""

from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Field

from .base import BaseModelConfig


class StructuredValue(BaseModelConfig):
    """A historical value that decoded as a JSON object."""

    model_config = ConfigDict(str_strip_whitespace=False)

    type: Literal["structured"] = "structured"
    record: dict[str, Any] = Field(..., description="Decoded document")


class RawValue(BaseModelConfig):
    """A historical value kept verbatim because it is not a JSON object."""

    model_config = ConfigDict(str_strip_whitespace=False)

    type: Literal["raw"] = "raw"
    text: str = Field(..., description="Value decoded as UTF-8 text")


HistoryValue = Annotated[
    Union[StructuredValue, RawValue], Field(discriminator="type")
]


class HistoryEntry(BaseModelConfig):
    """One committed version of a key, oldest first in a history listing."""

    model_config = ConfigDict(str_strip_whitespace=False)

    tx_id: str = Field(..., description="Transaction that wrote this version")
    timestamp: str = Field(..., description="Commit time, ISO-8601")
    is_deleted: bool = Field(default=False)
    value: HistoryValue

    def to_wire(self) -> dict[str, Any]:
        """Shape returned over the wire: the decoded record or the raw text."""
        value: Any = (
            self.value.record
            if isinstance(self.value, StructuredValue)
            else self.value.text
        )
        return {
            "TxId": self.tx_id,
            "Timestamp": self.timestamp,
            "IsDelete": str(self.is_deleted).lower(),
            "Value": value,
        }
