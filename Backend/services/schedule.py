"""
Schedule expansion: turns a medicine's schedule configuration into the
ordered time labels of a single day.

The three stored column shapes (schedule_type, custom_times, preset_times)
are resolved into one ScheduleConfig value at the model boundary; everything
downstream works on that value.
"""

import enum
import json
import math
import re
from dataclasses import dataclass
from typing import ClassVar


class ScheduleType(str, enum.Enum):
    preset = "preset"
    interval = "interval"
    custom = "custom"


PRESET_LABELS: dict[str, list[str]] = {
    "morning": ["Morning"],
    "noon": ["Noon"],
    "evening": ["Evening"],
    "night": ["Night"],
    "morning-night": ["Morning", "Night"],
    "morning-noon": ["Morning", "Noon"],
    "noon-night": ["Noon", "Night"],
    "morning-evening": ["Morning", "Evening"],
    "noon-evening": ["Noon", "Evening"],
    "evening-night": ["Evening", "Night"],
    "morning-noon-night": ["Morning", "Noon", "Night"],
    "morning-noon-evening": ["Morning", "Noon", "Evening"],
    "morning-evening-night": ["Morning", "Evening", "Night"],
    "noon-evening-night": ["Noon", "Evening", "Night"],
    "morning-noon-evening-night": ["Morning", "Noon", "Evening", "Night"],
}

DEFAULT_PRESET_BY_FREQUENCY: dict[int, list[str]] = {
    1: ["Morning"],
    2: ["Morning", "Night"],
    3: ["Morning", "Noon", "Night"],
    4: ["Morning", "Noon", "Evening", "Night"],
}

TIME_LABEL_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True)
class PresetSchedule:
    selector: str | None = None
    type: ClassVar[ScheduleType] = ScheduleType.preset


@dataclass(frozen=True)
class IntervalSchedule:
    type: ClassVar[ScheduleType] = ScheduleType.interval


@dataclass(frozen=True)
class CustomSchedule:
    times: tuple[str, ...] = ()
    type: ClassVar[ScheduleType] = ScheduleType.custom


ScheduleConfig = PresetSchedule | IntervalSchedule | CustomSchedule


def is_valid_time(value: str) -> bool:
    return bool(TIME_LABEL_RE.match(value or ""))


def clean_times(times) -> tuple[str, ...]:
    return tuple(t.strip() for t in (times or []) if isinstance(t, str) and t.strip())


def build_schedule(
    schedule_type: str | ScheduleType,
    custom_times=None,
    preset_selector: str | None = None,
) -> ScheduleConfig:
    """Raises ValueError for an unknown schedule type."""
    kind = ScheduleType(schedule_type)
    if kind is ScheduleType.preset:
        return PresetSchedule(selector=(preset_selector or "").strip() or None)
    if kind is ScheduleType.custom:
        return CustomSchedule(times=clean_times(custom_times))
    return IntervalSchedule()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def interval_labels(frequency: int) -> list[str]:
    if frequency < 1:
        return []
    step = 24 / frequency
    return [f"{_round_half_up(i * step):02d}:00" for i in range(frequency)]


def time_labels(config: ScheduleConfig, frequency: int) -> list[str]:
    if isinstance(config, PresetSchedule):
        if config.selector:
            return list(PRESET_LABELS.get(config.selector, []))
        return list(DEFAULT_PRESET_BY_FREQUENCY.get(frequency, []))
    if isinstance(config, CustomSchedule):
        return list(config.times)
    return interval_labels(frequency)


def expand(
    frequency: int,
    schedule_type: str | ScheduleType,
    custom_times=None,
    preset_selector: str | None = None,
) -> list[str]:
    return time_labels(build_schedule(schedule_type, custom_times, preset_selector), frequency)


def dump_custom_times(config: ScheduleConfig) -> str | None:
    if isinstance(config, CustomSchedule):
        return json.dumps(list(config.times))
    return None


def load_custom_times(raw: str | None) -> list[str]:
    # Older rows hold a bare comma separated string instead of a JSON array.
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return list(clean_times(raw.split(",")))
    if isinstance(parsed, str):
        parsed = parsed.split(",")
    if not isinstance(parsed, list):
        return []
    return list(clean_times(parsed))
