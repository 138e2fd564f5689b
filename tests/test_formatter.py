from gosafe.models.domain import HazardCategory
from gosafe.services.outputs.formatter import CATEGORY_COLORS, CATEGORY_LABELS, format_distance, format_duration


def test_format_duration_rounds_minutes_up():
    assert format_duration(61) == "2 min"
    assert format_duration(59 * 60) == "59 min"
    assert format_duration(3600) == "1 h 0 min"
    assert format_duration(3900) == "1 h 5 min"


def test_format_distance():
    assert format_distance(999.6) == "1000 m"
    assert format_distance(850.2) == "850 m"
    assert format_distance(1000) == "1.0 km"
    assert format_distance(7140) == "7.1 km"


def test_every_category_has_label_and_color():
    assert set(CATEGORY_LABELS) == set(HazardCategory)
    assert set(CATEGORY_COLORS) == set(HazardCategory)
