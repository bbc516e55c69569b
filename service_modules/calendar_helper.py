"""
Calendar Helper - pure date/time arithmetic for the training calendar.

Trainings are plain dicts with at least ``id``, ``date`` (YYYY-MM-DD),
``start_time`` (HH:MM) and ``duration`` (minutes). Nothing in here touches the
database, so the training service and the tests share the same functions.

Weeks always start on Monday (``date.weekday() == 0``).
"""
import re
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

GRID_CELLS = 42  # 6 weeks x 7 days
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
DAY_NAMES_FULL = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]

SLOT_FIRST_HOUR = 6
SLOT_LAST_HOUR = 22
SLOT_STEP_MINUTES = 30
MINUTES_PER_DAY = 24 * 60

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

DateLike = Union[date, str]


def parse_date(value: DateLike) -> date:
    """Accept a date, a datetime or a YYYY-MM-DD string and return a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not DATE_PATTERN.match(value):
        raise ValueError(f"Invalid date: {value}")
    return date.fromisoformat(value)


def format_date(d: date) -> str:
    return d.isoformat()


def time_to_minutes(time_str: str) -> int:
    """'09:30' -> 570. Raises ValueError unless the input is zero-padded HH:MM."""
    if not TIME_PATTERN.match(time_str):
        raise ValueError(f"Invalid time: {time_str}")
    hours, minutes = time_str.split(":")
    hours, minutes = int(hours), int(minutes)
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid time: {time_str}")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_valid_time(time_str: Optional[str]) -> bool:
    if not time_str:
        return False
    try:
        time_to_minutes(time_str)
        return True
    except (ValueError, TypeError):
        return False


def training_end_time(start_time: str, duration: int) -> str:
    return minutes_to_time(time_to_minutes(start_time) + duration)


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}min" if mins > 0 else f"{hours}h"


def is_past_date(value: DateLike, today: Optional[date] = None) -> bool:
    """True only for days strictly before today."""
    today = today or date.today()
    return parse_date(value) < today


def get_start_of_week(value: DateLike) -> date:
    d = parse_date(value)
    return d - timedelta(days=d.weekday())


def shift_month(value: DateLike, delta: int) -> date:
    """Move to the first day of the month ``delta`` months away."""
    d = parse_date(value)
    month_index = d.year * 12 + (d.month - 1) + delta
    return date(month_index // 12, month_index % 12 + 1, 1)


def trainings_for_date(trainings: Iterable[dict], value: DateLike) -> List[dict]:
    date_str = format_date(parse_date(value))
    return [t for t in trainings if t["date"] == date_str]


def build_month_grid(
    reference: DateLike,
    trainings: Iterable[dict],
    selected: Optional[DateLike] = None,
    today: Optional[date] = None
) -> List[dict]:
    """
    Build the month view: 42 cells starting on the Monday on or before the
    first day of the reference month.
    """
    ref = parse_date(reference)
    today = today or date.today()
    selected_date = parse_date(selected) if selected else None
    trainings = list(trainings)

    first_day = ref.replace(day=1)
    start = first_day - timedelta(days=first_day.weekday())

    cells = []
    for i in range(GRID_CELLS):
        cell_date = start + timedelta(days=i)
        cells.append({
            "date": format_date(cell_date),
            "day_number": cell_date.day,
            "is_current_month": cell_date.month == ref.month and cell_date.year == ref.year,
            "is_today": cell_date == today,
            "is_selected": selected_date is not None and cell_date == selected_date,
            "is_past": cell_date < today,
            "trainings": trainings_for_date(trainings, cell_date)
        })
    return cells


def build_week_view(reference: DateLike, trainings: Iterable[dict], today: Optional[date] = None) -> List[dict]:
    start = get_start_of_week(reference)
    today = today or date.today()
    trainings = list(trainings)

    days = []
    for i in range(7):
        day = start + timedelta(days=i)
        days.append({
            "date": format_date(day),
            "day_name": DAY_NAMES[i],
            "day_number": day.day,
            "is_today": day == today,
            "trainings": trainings_for_date(trainings, day)
        })
    return days


def generate_time_slots() -> List[str]:
    slots = []
    for hour in range(SLOT_FIRST_HOUR, SLOT_LAST_HOUR + 1):
        for minute in range(0, 60, SLOT_STEP_MINUTES):
            slots.append(f"{hour:02d}:{minute:02d}")
    return slots


def trainings_for_time_slot(trainings: Iterable[dict], value: DateLike, slot: str) -> List[dict]:
    """Trainings on the given day that are running at the start of ``slot``."""
    slot_minutes = time_to_minutes(slot)
    result = []
    for training in trainings_for_date(trainings, value):
        start = time_to_minutes(training["start_time"])
        if start <= slot_minutes < start + training["duration"]:
            result.append(training)
    return result


def build_day_view(value: DateLike, trainings: Iterable[dict]) -> List[dict]:
    trainings = list(trainings)
    return [
        {"time": slot, "trainings": trainings_for_time_slot(trainings, value, slot)}
        for slot in generate_time_slots()
    ]


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open intervals [start, end): touching ends do not overlap."""
    return start1 < end2 and end1 > start2


def find_conflict(
    trainings: Iterable[dict],
    date_str: str,
    start_time: str,
    duration: int,
    exclude_id: Optional[str] = None
) -> Optional[dict]:
    """
    Return the first training on ``date_str`` whose interval overlaps
    [start_time, start_time + duration), skipping ``exclude_id``.
    """
    target = parse_date(date_str)
    new_start = time_to_minutes(start_time)
    new_end = new_start + duration

    for training in trainings:
        if training["id"] == exclude_id or parse_date(training["date"]) != target:
            continue
        existing_start = time_to_minutes(training["start_time"])
        existing_end = existing_start + training["duration"]
        if intervals_overlap(new_start, new_end, existing_start, existing_end):
            return training
    return None


def filter_trainings(trainings: Iterable[dict], client_query: Optional[str] = None, status: Optional[str] = None) -> List[dict]:
    query = (client_query or "").lower()
    return [
        t for t in trainings
        if (not query or query in t["client_name"].lower())
        and (not status or t["status"] == status)
    ]
