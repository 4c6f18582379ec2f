import math

import pytest

from foamest.errors import InvalidPitchFormat
from foamest.geometry import effective_sqft, is_valid_pitch, parse_pitch, pitch_factor
from foamest.models import EXTERIOR_WALLS, GABLE, GENERAL, ROOF_DECK


def test_general_area_uses_length_times_width(area_factory):
    area = area_factory(length=10, width=20, area_type=GENERAL)
    assert effective_sqft(area) == 200


def test_gable_is_half_the_rectangle(area_factory):
    area = area_factory(length=10, width=20, area_type=GABLE)
    assert effective_sqft(area) == 100


def test_roof_deck_dimensions_always_apply_pitch(area_factory):
    area = area_factory(length=10, width=20, area_type=ROOF_DECK, roof_pitch="4/12")
    assert pitch_factor("4/12") == pytest.approx(1.05409, abs=1e-5)
    assert effective_sqft(area) == pytest.approx(210.82, abs=0.01)


def test_manual_sqft_pitch_is_opt_in(area_factory):
    plain = area_factory(area_sqft=500, area_type=ROOF_DECK, roof_pitch="12/12")
    pitched = area_factory(area_sqft=500, area_type=ROOF_DECK, roof_pitch="12/12", apply_pitch_to_manual_area=True)
    assert effective_sqft(plain) == 500
    assert effective_sqft(pitched) == pytest.approx(500 * math.sqrt(2))


def test_manual_sqft_is_not_halved_for_gables(area_factory):
    area = area_factory(area_sqft=300, area_type=GABLE, apply_pitch_to_manual_area=True)
    assert effective_sqft(area) == 300


def test_pitch_ignored_outside_roof_decks(area_factory):
    area = area_factory(length=8, width=40, area_type=EXTERIOR_WALLS, roof_pitch="not a pitch")
    assert effective_sqft(area) == 320


def test_empty_area_is_zero(area_factory):
    assert effective_sqft(area_factory()) == 0


def test_parse_pitch_accepts_spacing_and_decimals():
    assert parse_pitch(" 6 / 12 ") == (6.0, 12.0)
    assert parse_pitch("3.5/12") == (3.5, 12.0)
    assert pitch_factor("0/12") == 1.0


@pytest.mark.parametrize("pitch", ["4/0", "abc", "-4/12", "4/12/1", "", "4"])
def test_parse_pitch_rejects_bad_formats(pitch):
    with pytest.raises(InvalidPitchFormat):
        parse_pitch(pitch)
    assert is_valid_pitch(pitch) is False


def test_roof_deck_with_bad_pitch_raises(area_factory):
    area = area_factory(length=10, width=10, area_type=ROOF_DECK, roof_pitch="4/0")
    with pytest.raises(InvalidPitchFormat):
        effective_sqft(area)
