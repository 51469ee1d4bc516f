"""Wire contracts for the workflow event stream."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import EventDecodeError

logger = logging.getLogger(__name__)


class StepStatus:
    """Known step status tags.

    Status travels as a plain string so that tags outside this set are kept
    and displayed as-is.
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class EventType:
    WORKFLOW_INIT = "WORKFLOW_INIT"
    STEP_START = "STEP_START"
    STEP_COMPLETE = "STEP_COMPLETE"


class Step(BaseModel):
    """One unit of work reported by the external process."""

    id: str
    name: str = ""
    description: str = ""
    status: str = StepStatus.PENDING
    data: Any = None


class _Event(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        """Serialize event to its wire form."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class WorkflowInitEvent(_Event):
    """Installs a new workflow, replacing the current one."""

    type: Literal["WORKFLOW_INIT"] = EventType.WORKFLOW_INIT
    steps: List[Step] = Field(default_factory=list)

    @field_validator("steps")
    @classmethod
    def _unique_ids(cls, steps: List[Step]) -> List[Step]:
        seen = set()
        for step in steps:
            if step.id in seen:
                raise ValueError(f"duplicate step id: {step.id}")
            seen.add(step.id)
        return steps


class StepStartEvent(_Event):
    type: Literal["STEP_START"] = EventType.STEP_START
    step_id: str = Field(alias="stepId")


class StepCompleteEvent(_Event):
    type: Literal["STEP_COMPLETE"] = EventType.STEP_COMPLETE
    step_id: str = Field(alias="stepId")
    data: Any = None


class UnknownEvent(_Event):
    """Any event whose ``type`` this client does not understand."""

    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize back to the flat object it was parsed from."""
        fields = {key: value for key, value in self.payload.items() if key != "type"}
        return json.dumps({"type": self.type, **fields})


WorkflowEvent = Union[WorkflowInitEvent, StepStartEvent, StepCompleteEvent, UnknownEvent]

_EVENT_MODELS = {
    EventType.WORKFLOW_INIT: WorkflowInitEvent,
    EventType.STEP_START: StepStartEvent,
    EventType.STEP_COMPLETE: StepCompleteEvent,
}


def parse_event(raw: str | bytes) -> WorkflowEvent:
    """Decode one JSON text frame into a workflow event.

    Raises:
        EventDecodeError: If the frame is not a JSON object with a string
            ``type`` or a known event fails validation. Unknown ``type``
            values are returned as :class:`UnknownEvent`.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise EventDecodeError(f"Malformed event payload: {e}", raw) from e

    if not isinstance(data, dict):
        raise EventDecodeError(
            f"Event payload must be a JSON object, got {type(data).__name__}", raw
        )

    event_type = data.get("type")
    if not isinstance(event_type, str):
        raise EventDecodeError("Event payload has no string 'type' field", raw)

    model = _EVENT_MODELS.get(event_type)
    if model is None:
        payload = {key: value for key, value in data.items() if key != "type"}
        return UnknownEvent(type=event_type, payload=payload)

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise EventDecodeError(f"Invalid {event_type} event: {e}", raw) from e
