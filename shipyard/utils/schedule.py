"""Next run time of a CronJob schedule."""
import re
from datetime import datetime, timedelta
from typing import Union
from croniter import croniter
from shipyard.utils.errors import PermanentConfigError
from shipyard.utils.helpers import DEFAULT_TIME_FORMAT

EVERY_PREFIX = "@every "

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION = re.compile(r"^(?:\d+(?:\.\d+)?(?:ns|us|µs|ms|s|m|h))+$")
_DURATION_UNITS = {
    "ns": timedelta(microseconds=0.001),
    "us": timedelta(microseconds=1),
    "µs": timedelta(microseconds=1),
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
}

_MONTH_NAMES = {
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
}
_DOW_NAMES = {"sun", "mon", "tue", "wed", "thu", "fri", "sat"}
# field index -> names accepted besides integers
_FIELD_NAMES = {3: _MONTH_NAMES, 4: _DOW_NAMES}


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as `5m`, `1h30m` or `1.5s`."""
    value = value.strip()
    if not _DURATION.match(value):
        raise PermanentConfigError(f"unparseable schedule: invalid duration {value!r}")
    total = timedelta()
    for amount, unit in _DURATION_PART.findall(value):
        total += float(amount) * _DURATION_UNITS[unit]
    return total


def _validate_fields(schedule: str) -> None:
    fields = schedule.split()
    if len(fields) != 5:
        raise PermanentConfigError(
            f"expected exactly 5 fields, found {len(fields)}: {schedule}"
        )
    for index, field in enumerate(fields):
        names = _FIELD_NAMES.get(index, ())
        for token in re.split(r"[,/-]", field):
            if token in ("*", "?") or token.isdigit():
                continue
            if token.lower() in names:
                continue
            raise PermanentConfigError(f"failed to parse int from {token}: {schedule}")


def _as_datetime(last: Union[datetime, str]) -> datetime:
    if isinstance(last, datetime):
        return last
    try:
        return datetime.strptime(last, DEFAULT_TIME_FORMAT)
    except (TypeError, ValueError) as ex:
        raise PermanentConfigError(f"invalid time {last!r}: {ex}") from ex


def next_schedule_time(schedule: str, last: Union[datetime, str]) -> str:
    """Time of the first run after `last`, formatted `YYYY-mm-dd HH:MM:SS`.

    Raises:
        PermanentConfigError: the schedule cannot be parsed
    """
    schedule = (schedule or "").strip()
    start = _as_datetime(last)

    if schedule.startswith(EVERY_PREFIX):
        delay = parse_duration(schedule[len(EVERY_PREFIX):])
        return (start + delay).strftime(DEFAULT_TIME_FORMAT)

    if not schedule.startswith("@"):
        _validate_fields(schedule)

    try:
        itr = croniter(schedule, start)
        upcoming = itr.get_next(datetime)
    except (ValueError, KeyError) as ex:
        raise PermanentConfigError(f"unparseable schedule: {schedule}: {ex}") from ex
    return upcoming.strftime(DEFAULT_TIME_FORMAT)
