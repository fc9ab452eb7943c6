import math
from datetime import date, datetime, timedelta
from typing import Type, TypeVar
from pydantic import BaseModel
import pytz

T = TypeVar("T", bound=BaseModel)

ONE_DAY = timedelta(days=1)

def dict_to_model(model_cls: Type[T], data: dict) -> T:
    # keep both attribute names and their camelCase aliases
    valid_keys = set(model_cls.model_fields.keys())
    valid_keys |= {f.alias for f in model_cls.model_fields.values() if f.alias}
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    return model_cls(**filtered)

def to_utc(dt: datetime) -> datetime:
    """Naive datetimes (what pymongo hands back) are taken to be UTC already."""
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)

def utc_now() -> datetime:
    return datetime.now(pytz.utc)

def utc_day(dt: datetime) -> date:
    return to_utc(dt).date()

def utc_midnight(dt: datetime) -> datetime:
    day = utc_day(dt)
    return pytz.utc.localize(datetime(day.year, day.month, day.day))

def round_half_up(value: float) -> int:
    # Math.round semantics: .5 always goes towards +infinity
    return int(math.floor(value + 0.5))

def one_year_before(dt: datetime) -> datetime:
    try:
        return dt.replace(year=dt.year - 1)
    except ValueError:
        # Feb 29 rolls over to Mar 1
        return dt.replace(year=dt.year - 1, month=3, day=1)

def parse_date(date_str: str) -> date:
    return datetime.strptime(date_str, "%d%m%Y").date()
