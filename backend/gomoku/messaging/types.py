from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, field_validator

from gomoku.logic.state import PublicRoom

_MAX_CODE_LENGTH = 32


class ServerMessageType(StrEnum):
    """Session-level messages. Room broadcasts are tagged by EventType."""

    HELLO = "hello"
    ROOM_CREATED = "room_created"
    ERROR = "error"


# --- Client -> server ---


class EmptyPayload(BaseModel):
    pass


class JoinRoomPayload(BaseModel):
    # a missing code is answered with "room not found", not dropped
    code: str | None = Field(default=None, max_length=_MAX_CODE_LENGTH)


class PlaceStonePayload(BaseModel):
    # bounds are a game rule, checked by the state machine; no coercion from strings or bools
    x: StrictInt
    y: StrictInt


class _ClientEnvelope(BaseModel):
    @field_validator("payload", mode="before", check_fields=False)
    @classmethod
    def _null_payload_is_empty(cls, v: Any) -> Any:  # noqa: ANN401
        return {} if v is None else v


class CreateRoomMessage(_ClientEnvelope):
    type: Literal["create_room"]
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


class JoinRoomMessage(_ClientEnvelope):
    type: Literal["join_room"]
    payload: JoinRoomPayload = Field(default_factory=JoinRoomPayload)


class PlaceStoneMessage(_ClientEnvelope):
    type: Literal["place_stone"]
    payload: PlaceStonePayload


class RequestRestartMessage(_ClientEnvelope):
    type: Literal["request_restart"]
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


class LeaveRoomMessage(_ClientEnvelope):
    type: Literal["leave_room"]
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


ClientMessage = Annotated[
    CreateRoomMessage | JoinRoomMessage | PlaceStoneMessage | RequestRestartMessage | LeaveRoomMessage,
    Field(discriminator="type"),
]

_client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


def parse_client_message(
    data: dict[str, Any],
) -> CreateRoomMessage | JoinRoomMessage | PlaceStoneMessage | RequestRestartMessage | LeaveRoomMessage:
    """Validate a decoded envelope into a typed client message."""
    return _client_message_adapter.validate_python(data)


# --- Server -> client ---


class HelloPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(alias="clientId")


class HelloMessage(BaseModel):
    type: Literal[ServerMessageType.HELLO] = ServerMessageType.HELLO
    payload: HelloPayload


class RoomCreatedMessage(BaseModel):
    type: Literal[ServerMessageType.ROOM_CREATED] = ServerMessageType.ROOM_CREATED
    payload: PublicRoom


class ErrorPayload(BaseModel):
    message: str


class ErrorMessage(BaseModel):
    type: Literal[ServerMessageType.ERROR] = ServerMessageType.ERROR
    payload: ErrorPayload


def to_wire(message: BaseModel) -> dict[str, Any]:
    """Dump a server message model into its JSON-ready envelope."""
    return message.model_dump(mode="json", by_alias=True)
