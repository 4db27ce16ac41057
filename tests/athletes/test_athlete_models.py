import pytest

from speedform.athletes.models import Athlete, hrv_band_label, progress_percentage, slugify


@pytest.mark.parametrize(
    ("baseline", "current", "target", "expected"),
    [
        (48, 50, 58, 20.0),
        (48, 58, 58, 100.0),
        (48, 60, 58, 120.0),
        (48, 46, 58, -20.0),
        (45, 47, 52, 28.6),
    ],
)
def test_progress_percentage(baseline, current, target, expected):
    assert progress_percentage(baseline, current, target) == expected


@pytest.mark.parametrize(
    ("baseline", "current", "target"),
    [
        (None, 50, 58),
        (48, None, 58),
        (48, 50, None),
        (0, 50, 58),
        (50, 52, 50),
    ],
)
def test_progress_percentage_unavailable(baseline, current, target):
    assert progress_percentage(baseline, current, target) is None


def test_hrv_band_label():
    athlete = Athlete(name="Maya", hrv_low=55, hrv_high=75)

    assert hrv_band_label(athlete, 55) == "balanced"
    assert hrv_band_label(athlete, 80) == "unbalanced"
    assert hrv_band_label(athlete, None) is None
    assert hrv_band_label(Athlete(name="Ben"), 60) is None


def test_slugify():
    assert slugify("Maya  Lopez") == "maya-lopez"
    assert slugify("J.R. O'Neil") == "j-r-o-neil"


def test_to_row_omits_missing_id():
    row = Athlete(name="Maya").to_row()

    assert "id" not in row
    assert row["is_public"] is False
