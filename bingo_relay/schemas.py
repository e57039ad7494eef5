"""
Wire schemas for inbound relay frames.

Every inbound frame is a JSON object discriminated by its ``type`` field.
``parse_message`` maps a raw frame to exactly one of the models below or
raises ``MessageParseError``.
"""
from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, TypeAdapter, ValidationError, field_validator


class InboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PlayerJoin(InboundMessage):
    type: Literal["player-join"]
    player_key: StrictStr = Field(alias="playerKey", min_length=1)


class AdminJoin(InboundMessage):
    type: Literal["admin-join"]


class AssignCartones(InboundMessage):
    type: Literal["assign-cartones"]
    player_key: StrictStr = Field(alias="playerKey", min_length=1)
    cartones: List[Any]


class NewNumber(InboundMessage):
    type: Literal["new-number"]
    number: StrictInt


class ResetNumbers(InboundMessage):
    type: Literal["reset-numbers"]


class Report(InboundMessage):
    type: Literal["report"]
    report: Any

    @field_validator("report")
    @classmethod
    def report_not_empty(cls, value: Any) -> Any:
        # null, "", 0 and false carry nothing worth relaying
        if value is None or value in ("", 0):
            raise ValueError("report payload is empty")
        return value


class RequestPlayerList(InboundMessage):
    type: Literal["request-player-list"]


class Pong(InboundMessage):
    type: Literal["pong"]


Message = Annotated[
    Union[
        PlayerJoin,
        AdminJoin,
        AssignCartones,
        NewNumber,
        ResetNumbers,
        Report,
        RequestPlayerList,
        Pong,
    ],
    Field(discriminator="type"),
]

_message_adapter = TypeAdapter(Message)


class MessageParseError(ValueError):
    """Raised when a raw frame is not a recognised, well-formed message."""


def parse_message(raw: Union[str, bytes]) -> Message:
    try:
        return _message_adapter.validate_json(raw)
    except ValidationError as exc:
        raise MessageParseError(str(exc)) from exc
