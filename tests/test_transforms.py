"""Tests for affine matrix composition, application and decomposition."""

import math

import pytest

from idml_resolve.exceptions import DataError
from idml_resolve.transforms import (
    IDENTITY,
    AffineMatrix,
    Point,
    apply,
    compose,
    decompose,
    multiply,
    parse_item_transform,
    rotation,
    scaling,
    translation,
)


class TestCompose:
    """Tests for folding container transforms into one matrix."""

    def test_empty_sequence_is_identity(self) -> None:
        """Nothing to compose yields the identity matrix."""
        assert compose([]) == IDENTITY

    def test_single_matrix_is_unchanged(self) -> None:
        m = AffineMatrix(2, 0, 0, 3, 5, 7)
        assert compose([m]) == m

    def test_translations_accumulate(self) -> None:
        """Nested translations add up."""
        combined = compose([translation(10, 20), translation(-3, 4), translation(1, 1)])
        assert combined.is_close(translation(8, 25))

    def test_inner_transform_applies_first(self) -> None:
        """The last matrix (the element's own) acts on the point first."""
        outer_translate = compose([translation(10, 0), scaling(2)])
        outer_scale = compose([scaling(2), translation(10, 0)])
        assert apply(outer_translate, (1, 1)) == Point(12, 2)
        assert apply(outer_scale, (1, 1)) == Point(22, 2)

    def test_matches_pairwise_multiplication(self) -> None:
        a = AffineMatrix(1, 0.5, -0.2, 1, 3, 4)
        b = rotation(0.3)
        c = AffineMatrix(2, 0, 0, 0.5, -7, 1)
        assert compose([a, b, c]).is_close(multiply(a, multiply(b, c)))
        assert compose([a, b, c]).is_close(a @ b @ c)

    def test_identity_is_neutral_on_both_sides(self) -> None:
        m = AffineMatrix(0.8, -0.6, 0.6, 0.8, 12, -4)
        assert compose([m, IDENTITY]) == m
        assert compose([IDENTITY, m]) == m

    def test_associative(self) -> None:
        a = translation(3, 9)
        b = rotation(1.1)
        c = scaling(0.5, 4)
        assert compose([a, b, c]).is_close(compose([compose([a, b]), c]))

    def test_rotation_composition_adds_angles(self) -> None:
        combined = compose([rotation(math.pi / 4), rotation(math.pi / 4)])
        assert combined.is_close(rotation(math.pi / 2))


class TestApply:
    def test_identity_leaves_point(self) -> None:
        assert apply(IDENTITY, (3.5, -2)) == Point(3.5, -2)

    def test_full_matrix(self) -> None:
        """x' = a x + c y + e and y' = b x + d y + f."""
        m = AffineMatrix(1, 2, 3, 4, 5, 6)
        assert apply(m, (1, 1)) == Point(9, 12)


class TestDecompose:
    """Tests for translation/rotation/scale extraction."""

    def test_identity(self) -> None:
        parts = decompose(IDENTITY)
        assert parts.translation == Point(0, 0)
        assert parts.rotation == 0.0
        assert parts.scale_x == 1.0
        assert parts.scale_y == 1.0

    def test_quarter_turn(self) -> None:
        parts = decompose(compose([translation(5, 6), rotation(math.pi / 2)]))
        assert parts.rotation == pytest.approx(math.pi / 2)
        assert parts.translation == Point(5, 6)

    def test_negative_rotation_normalized_into_range(self) -> None:
        """Clockwise rotations come back in [0, 2π)."""
        parts = decompose(rotation(-math.pi / 2))
        assert parts.rotation == pytest.approx(3 * math.pi / 2)
        assert 0 <= parts.rotation < math.tau

    def test_tiny_negative_angle_stays_in_range(self) -> None:
        parts = decompose(rotation(-1e-18))
        assert 0 <= parts.rotation < math.tau

    def test_scale_extraction(self) -> None:
        parts = decompose(compose([rotation(0.7), scaling(2, 3)]))
        assert parts.scale_x == pytest.approx(2)
        assert parts.scale_y == pytest.approx(3)
        assert parts.rotation == pytest.approx(0.7)


class TestParseItemTransform:
    """Tests for ItemTransform attribute parsing."""

    def test_identity_string(self) -> None:
        assert parse_item_transform("1 0 0 1 0 0") == IDENTITY

    def test_extra_whitespace_and_exponents(self) -> None:
        m = parse_item_transform("  1  0\t0 1 1e2 -2.5 ")
        assert m == AffineMatrix(1, 0, 0, 1, 100, -2.5)

    def test_missing_value_raises(self) -> None:
        with pytest.raises(DataError) as exc:
            parse_item_transform(None, "u1")
        assert exc.value.element_id == "u1"
        assert exc.value.attribute == "ItemTransform"

    def test_wrong_count_raises(self) -> None:
        with pytest.raises(DataError, match="Expected 6 numbers"):
            parse_item_transform("1 0 0 1")

    @pytest.mark.parametrize("value", ["1 0 0 1 a 0", "1 0 0 1 0 NaN", "1,0,0,1,0,0"])
    def test_malformed_number_raises(self, value: str) -> None:
        with pytest.raises(DataError):
            parse_item_transform(value)
