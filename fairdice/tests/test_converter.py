from collections import Counter

import pytest

from fairdice.converter import avoid_modulo_bias, draw, rejection_threshold, to_die_face
from fairdice.errors import InsufficientEntropyError, MalformedInputError
from fairdice.tests.helpers import ALL_FF_RANDOMNESS, FACE_SIX_RANDOMNESS, GOOD_RANDOMNESS


def test_threshold_for_six_sides():
    assert rejection_threshold(6) == 252
    assert rejection_threshold(1) == 256
    assert rejection_threshold(256) == 256
    assert rejection_threshold(7) == 252
    assert rejection_threshold(100) == 200


@pytest.mark.parametrize("sides", [0, -1, 257])
def test_threshold_rejects_out_of_range_sides(sides):
    with pytest.raises(ValueError):
        rejection_threshold(sides)


def test_draw_is_in_range_and_deterministic():
    for hx in (GOOD_RANDOMNESS, FACE_SIX_RANDOMNESS, "00ff", "fbfc", "deadbeef" * 8):
        first = draw(hx, 6)
        assert 0 <= first <= 5
        assert all(draw(hx, 6) == first for _ in range(5))


def test_first_byte_above_threshold_is_skipped():
    # 0xfc == 252 is rejected for sides=6; the next byte 0x00 decides
    assert draw("fc" + "00" * 31, 6) == 0
    # 0xfb == 251 is the largest accepted byte
    assert draw("fb00", 6) == 251 % 6


def test_all_bytes_rejected_falls_back_to_first_byte():
    assert draw(ALL_FF_RANDOMNESS, 6) == 3
    assert to_die_face(ALL_FF_RANDOMNESS, 6) == 4
    assert draw("fdfeff", 6) == 0xFD % 6


def test_strict_mode_raises_instead_of_biased_fallback():
    with pytest.raises(InsufficientEntropyError) as ei:
        draw(ALL_FF_RANDOMNESS, 6, strict=True)
    assert ei.value.n_bytes == 32
    assert ei.value.sides == 6
    # strict mode changes nothing when a byte qualifies
    assert draw(GOOD_RANDOMNESS, 6, strict=True) == draw(GOOD_RANDOMNESS, 6)


def test_accepted_bytes_are_uniform_over_faces():
    counts = Counter(draw(f"{b:02x}", 6) for b in range(252))
    assert set(counts) == set(range(6))
    assert set(counts.values()) == {42}


@pytest.mark.parametrize("bad, reason", [("abc", "odd-length"), ("zz11", "non-hex"), ("", "empty"), ("0x", "empty"), ("12 34", "non-hex"), ("abc\n", "non-hex"), ("00ff\n", "non-hex")])
def test_malformed_input(bad, reason):
    with pytest.raises(MalformedInputError) as ei:
        draw(bad, 6)
    assert ei.value.reason == reason
    assert isinstance(ei.value, ValueError)


def test_prefix_and_case_are_accepted():
    assert draw("0xFC00", 6) == draw("fc00", 6) == 0


def test_die_face_is_one_based():
    assert to_die_face(GOOD_RANDOMNESS) == 1
    assert to_die_face(FACE_SIX_RANDOMNESS) == 6


def test_other_die_sizes():
    assert draw("ff", 256) == 255
    assert draw("ff", 1) == 0
    # sides=20 → threshold 240; 0xf0 (240) skipped, 0x15 (21) → 1
    assert draw("f015", 20) == 1


def test_avoid_modulo_bias_requires_data():
    with pytest.raises(ValueError):
        avoid_modulo_bias(b"", 6)
    assert avoid_modulo_bias([252, 253, 7], 6) == 1
