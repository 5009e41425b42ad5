import pytest
from pydantic import ValidationError

from gomoku.messaging.types import (
    CreateRoomMessage,
    ErrorMessage,
    ErrorPayload,
    HelloMessage,
    HelloPayload,
    JoinRoomMessage,
    LeaveRoomMessage,
    PlaceStoneMessage,
    RequestRestartMessage,
    parse_client_message,
    to_wire,
)


class TestParseClientMessage:
    @pytest.mark.parametrize(
        ("message_type", "expected"),
        [
            ("create_room", CreateRoomMessage),
            ("request_restart", RequestRestartMessage),
            ("leave_room", LeaveRoomMessage),
        ],
    )
    def test_payloadless_messages(self, message_type, expected):
        assert isinstance(parse_client_message({"type": message_type}), expected)

    def test_null_payload_treated_as_empty(self):
        message = parse_client_message({"type": "join_room", "payload": None})
        assert isinstance(message, JoinRoomMessage)
        assert message.payload.code is None

    def test_join_room_with_code(self):
        message = parse_client_message({"type": "join_room", "payload": {"code": "ABC123"}})
        assert message.payload.code == "ABC123"

    def test_place_stone(self):
        message = parse_client_message({"type": "place_stone", "payload": {"x": 3, "y": 4}})
        assert isinstance(message, PlaceStoneMessage)
        assert (message.payload.x, message.payload.y) == (3, 4)

    def test_place_stone_out_of_range_still_parses(self):
        message = parse_client_message({"type": "place_stone", "payload": {"x": 99, "y": -1}})
        assert message.payload.x == 99

    def test_place_stone_requires_coordinates(self):
        with pytest.raises(ValidationError):
            parse_client_message({"type": "place_stone", "payload": {"x": 3}})

    @pytest.mark.parametrize(
        "payload",
        [{"x": "7", "y": 1}, {"x": 1, "y": True}, {"x": 7.0, "y": 1}, {"x": None, "y": 1}],
    )
    def test_place_stone_coordinates_not_coerced(self, payload):
        with pytest.raises(ValidationError):
            parse_client_message({"type": "place_stone", "payload": payload})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_client_message({"type": "chat", "payload": {}})

    def test_missing_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_client_message({"payload": {}})

    def test_overlong_code_rejected(self):
        with pytest.raises(ValidationError):
            parse_client_message({"type": "join_room", "payload": {"code": "X" * 100}})


class TestServerMessages:
    def test_hello_uses_camel_case(self):
        wire = to_wire(HelloMessage(payload=HelloPayload(client_id="abc")))
        assert wire == {"type": "hello", "payload": {"clientId": "abc"}}

    def test_error(self):
        wire = to_wire(ErrorMessage(payload=ErrorPayload(message="Room not found")))
        assert wire == {"type": "error", "payload": {"message": "Room not found"}}
