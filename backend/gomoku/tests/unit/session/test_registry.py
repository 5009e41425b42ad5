import pytest

from gomoku.logic.rng import create_rng
from gomoku.session.registry import RoomCodeExhaustedError, RoomRegistry, normalize_code


def _codes(*codes):
    it = iter(codes)
    return lambda: next(it)


class TestRoomRegistry:
    def test_create_and_lookup(self, registry):
        room = registry.create_room()
        assert registry.get_room(room.code) is room
        assert registry.room_count == 1

    def test_lookup_ignores_case_and_whitespace(self):
        registry = RoomRegistry(code_factory=_codes("ABC123"))
        room = registry.create_room()
        assert registry.get_room("  abc123 ") is room

    def test_unknown_code(self, registry):
        assert registry.get_room("NOPE00") is None

    def test_collision_is_retried(self):
        registry = RoomRegistry(code_factory=_codes("AAAAAA", "AAAAAA", "BBBBBB"))
        first = registry.create_room()
        second = registry.create_room()

        assert first.code == "AAAAAA"
        assert second.code == "BBBBBB"
        assert registry.get_room("AAAAAA") is first

    def test_exhausted_attempts_raise(self):
        registry = RoomRegistry(code_factory=lambda: "SAME00", max_code_attempts=3)
        registry.create_room()
        with pytest.raises(RoomCodeExhaustedError):
            registry.create_room()
        assert registry.room_count == 1

    def test_seeded_codes_reproducible(self):
        a = RoomRegistry(create_rng(3))
        b = RoomRegistry(create_rng(3))
        assert [a.create_room().code for _ in range(3)] == [b.create_room().code for _ in range(3)]

    def test_delete_room(self, registry):
        room = registry.create_room()
        registry.delete_room(room.code)
        assert registry.get_room(room.code) is None
        # deleting twice is harmless
        registry.delete_room(room.code)

    def test_clear(self, registry):
        registry.create_room()
        registry.create_room()
        registry.clear()
        assert registry.room_count == 0


def test_normalize_code():
    assert normalize_code(" k7q2zd\n") == "K7Q2ZD"
