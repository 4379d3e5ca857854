import pytest

from shams.knowledge.jordan_data import (
    DESIGN_DEFAULTS,
    LOCATIONS,
    MONTH_NAMES_AR,
    MONTHLY_PEAK_SUN_HOURS,
    PEAK_SUN_HOURS,
    STANDARD_WIRE_SIZES_MM2,
    get_location_name_ar,
    get_monthly_sun_hours,
    get_peak_sun_hours,
)
from shams.models import Location


def test_every_city_has_a_full_profile():
    for city in LOCATIONS:
        assert len(MONTHLY_PEAK_SUN_HOURS[city]) == 12
        assert city in PEAK_SUN_HOURS
    assert len(MONTH_NAMES_AR) == 12


def test_lookups_accept_enum_or_string():
    assert get_peak_sun_hours(Location.AQABA) == get_peak_sun_hours("aqaba") == 6.0
    assert get_monthly_sun_hours(Location.AMMAN)[0] == 3.4
    assert get_location_name_ar(Location.ZARQA) == "الزرقاء"


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        PEAK_SUN_HOURS["amman"] = 9.9
    with pytest.raises(TypeError):
        DESIGN_DEFAULTS["tilt_deg"] = 10


def test_wire_sizes_ascending():
    assert list(STANDARD_WIRE_SIZES_MM2) == sorted(STANDARD_WIRE_SIZES_MM2)
