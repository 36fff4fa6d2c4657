import numpy as np
import pytest

from tilestream.util.math import (
    HEX2SPACE,
    ROTATE_4X,
    SPACE2HEX,
    cube_round,
    floor_div,
    normalize,
    round_half_away,
)


def test_hex_matrices_are_inverse():
    assert np.allclose(HEX2SPACE @ SPACE2HEX, np.eye(2))


def test_matrix_constants_are_read_only():
    with pytest.raises(ValueError):
        HEX2SPACE[0, 0] = 0.0
    with pytest.raises(ValueError):
        ROTATE_4X[0][0, 0] = 1


def test_rotations_cover_four_quarter_turns():
    v = np.array([1, 0])
    turned = {tuple(int(c) for c in rot @ v) for rot in ROTATE_4X}
    assert turned == {(1, 0), (0, 1), (-1, 0), (0, -1)}


@pytest.mark.parametrize(
    "value, step, expected",
    [
        (0.4, 1.0, 0),
        (-0.4, 1.0, -1),
        (-1.0, 1.0, -1),
        (3 * 0.1, 0.1, 3),
        (-11 * 0.7, 0.7, -11),
        (2.999, 1.0, 2),
    ],
)
def test_floor_div(value, step, expected):
    assert floor_div(value, step) == expected


def test_round_half_away_from_zero():
    assert round_half_away(0.5) == 1.0
    assert round_half_away(-0.5) == -1.0
    assert round_half_away(2.5) == 3.0
    assert round_half_away(0.49) == 0.0


def test_cube_round_fixes_largest_error():
    # x is off by 0.4, the most of the three, so it is rebuilt from y and z
    assert cube_round(0.4, -0.3, -0.1) == (0, 0, 0)
    assert cube_round(1.2, -0.7, -0.5) == (1, -1, 0)
    for frac in [(0.5, -0.5, 0.0), (0.33, 0.33, -0.66), (-1.5, 0.75, 0.75)]:
        assert sum(cube_round(*frac)) == 0


def test_cube_round_tie_order():
    # x and y tie; x only wins when strictly largest, so y is rebuilt
    assert cube_round(0.5, -0.5, 0.0) == (1, -1, 0)


def test_normalize():
    assert np.allclose(normalize(np.array([0.0, 3.0, 4.0])), [0.0, 0.6, 0.8])
    zero = np.zeros(3)
    assert normalize(zero) is zero
