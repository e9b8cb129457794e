"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Wire models exchanged with the execution backend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Base model using camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Render the JSON body sent to the backend."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EnqueueExecutionRequest(_WireModel):
    name: str
    arguments: list[Any] = Field(default_factory=list)
    schedule_for: datetime
    metadata: dict[str, str] = Field(default_factory=dict)
    discard_after: datetime | None = None


class EnqueueExecutionResponse(_WireModel):
    id: str


class FetchExecutionRequest(_WireModel):
    id: str


class FetchExecutionResponse(_WireModel):
    """
    Snapshot of one execution.

    ``state`` is kept as a plain string so newer backend states still parse.
    """

    id: str
    state: str
    result: Any = None


class CancelExecutionRequest(_WireModel):
    id: str
    force: bool = False


class CancelExecutionResponse(_WireModel):
    pass


class ExecutionTry(_WireModel):
    id: str
    state: str


GetExecutionTriesResponse: TypeAlias = list[ExecutionTry]


class RescheduleExecutionRequest(_WireModel):
    id: str
    schedule_for: datetime


class RescheduleExecutionResponse(_WireModel):
    pass
