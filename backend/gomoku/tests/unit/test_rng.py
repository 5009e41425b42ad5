import pytest

from gomoku.logic.board import PlayerColor
from gomoku.logic.rng import (
    INVITE_CODE_ALPHABET,
    INVITE_CODE_LENGTH,
    assign_colors,
    create_rng,
    generate_invite_code,
)


class TestInviteCodes:
    def test_code_shape(self):
        code = generate_invite_code(create_rng(1))
        assert len(code) == INVITE_CODE_LENGTH
        assert all(ch in INVITE_CODE_ALPHABET for ch in code)

    def test_same_seed_same_codes(self):
        a, b = create_rng(42), create_rng(42)
        assert [generate_invite_code(a) for _ in range(5)] == [generate_invite_code(b) for _ in range(5)]

    def test_unseeded_generators_differ(self):
        codes = {generate_invite_code(create_rng()) for _ in range(10)}
        assert len(codes) > 1


class TestAssignColors:
    def test_one_black_one_white(self):
        colors = assign_colors(["alice", "bob"], create_rng(7))
        assert set(colors) == {"alice", "bob"}
        assert sorted(colors.values()) == [PlayerColor.BLACK, PlayerColor.WHITE]

    def test_deterministic_for_seed(self):
        assert assign_colors(["a", "b"], create_rng(99)) == assign_colors(["a", "b"], create_rng(99))

    def test_join_order_does_not_decide_black(self):
        """Over many seeds the first joiner is Black roughly half the time."""
        black_first = sum(
            assign_colors(["first", "second"], create_rng(seed))["first"] == PlayerColor.BLACK for seed in range(200)
        )
        assert 60 < black_first < 140

    @pytest.mark.parametrize("ids", [["solo"], ["a", "b", "c"], ["same", "same"]])
    def test_requires_two_distinct_ids(self, ids):
        with pytest.raises(ValueError, match="2 distinct"):
            assign_colors(ids, create_rng(0))
