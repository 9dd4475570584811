import datetime as dt
from typing import Optional

_DATE_FORMAT_STRING = r"%m/%d/%Y"
_TIME_FORMAT_STRING = r"%H:%M:%S"
_TIMEPOINT_FORMAT_STRING = f"{_DATE_FORMAT_STRING} {_TIME_FORMAT_STRING}"


def timepoint_datetime(_date: str, _time: str) -> Optional[dt.datetime]:
    """
    qstat prints submit/start times as two fields, in UTC.

    ("01/02/2020", "03:04:05") -> dt.datetime(2020, 1, 2, 3, 4, 5, tzinfo=utc)
    ("01/02/2020", "bad") -> dt.datetime(2020, 1, 2, tzinfo=utc)
    ("bad", "03:04:05") -> None
    """
    try:
        out = dt.datetime.strptime(f"{_date} {_time}", _TIMEPOINT_FORMAT_STRING)
    except ValueError:
        out = _date_datetime(_date)

    if out is None:
        return None
    return out.replace(tzinfo=dt.timezone.utc)


def _date_datetime(_v: str) -> Optional[dt.datetime]:
    try:
        return dt.datetime.strptime(_v, _DATE_FORMAT_STRING)
    except ValueError:
        return None
