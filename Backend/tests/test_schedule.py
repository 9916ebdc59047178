import pytest

from services.schedule import (
    CustomSchedule,
    IntervalSchedule,
    PresetSchedule,
    ScheduleType,
    build_schedule,
    expand,
    interval_labels,
    is_valid_time,
    load_custom_times,
)


@pytest.mark.parametrize("frequency", [1, 2, 3, 4])
def test_interval_labels_are_evenly_spaced_from_midnight(frequency: int) -> None:
    labels = expand(frequency, "interval")
    assert len(labels) == frequency
    assert labels[0] == "00:00"
    hours = [int(label[:2]) for label in labels]
    assert hours == sorted(set(hours))
    assert all(label.endswith(":00") for label in labels)


def test_interval_labels_exact_values() -> None:
    assert interval_labels(3) == ["00:00", "08:00", "16:00"]
    assert interval_labels(4) == ["00:00", "06:00", "12:00", "18:00"]
    assert interval_labels(0) == []


def test_preset_selector_lookup() -> None:
    assert expand(2, "preset", preset_selector="morning-night") == ["Morning", "Night"]
    assert expand(4, "preset", preset_selector="morning-noon-evening-night") == [
        "Morning",
        "Noon",
        "Evening",
        "Night",
    ]


def test_unknown_preset_selector_yields_nothing() -> None:
    assert expand(1, "preset", preset_selector="brunch") == []


@pytest.mark.parametrize(
    "frequency, expected",
    [
        (1, ["Morning"]),
        (2, ["Morning", "Night"]),
        (3, ["Morning", "Noon", "Night"]),
        (4, ["Morning", "Noon", "Evening", "Night"]),
        (5, []),
    ],
)
def test_preset_without_selector_falls_back_to_frequency(frequency, expected) -> None:
    assert expand(frequency, ScheduleType.preset) == expected


def test_custom_times_keep_order_and_drop_blanks() -> None:
    labels = expand(3, "custom", ["20:00", "  ", "08:00", "", " 14:00 "])
    assert labels == ["20:00", "08:00", "14:00"]


def test_custom_count_mismatch_is_visible_to_caller() -> None:
    assert len(expand(4, "custom", ["08:00", "14:00", "20:00"])) == 3


def test_build_schedule_returns_tagged_variants() -> None:
    assert build_schedule("preset", preset_selector="noon") == PresetSchedule(selector="noon")
    assert build_schedule("interval") == IntervalSchedule()
    assert build_schedule("custom", ["08:00"]) == CustomSchedule(times=("08:00",))
    with pytest.raises(ValueError):
        build_schedule("hourly")


def test_is_valid_time() -> None:
    assert is_valid_time("00:00")
    assert is_valid_time("23:59")
    assert not is_valid_time("24:00")
    assert not is_valid_time("7:30")
    assert not is_valid_time("12:60")


def test_load_custom_times_accepts_json_and_legacy_strings() -> None:
    assert load_custom_times('["08:00", "20:00"]') == ["08:00", "20:00"]
    assert load_custom_times("08:00, 20:00") == ["08:00", "20:00"]
    assert load_custom_times(None) == []
