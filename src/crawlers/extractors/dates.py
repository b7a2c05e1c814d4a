from datetime import datetime, time
from zoneinfo import ZoneInfo

BEIJING_TIMEZONE = ZoneInfo("Asia/Shanghai")
CN_DATE_FORMATS = ("%Y年%m月%d日", "%Y年%m月%d")
ISO_DATE_FORMAT = "%Y-%m-%d"


def beijing_now(now: datetime | None = None) -> datetime:
    current = now or datetime.now(BEIJING_TIMEZONE)
    if current.tzinfo is None:
        current = current.replace(tzinfo=BEIJING_TIMEZONE)
    return current.astimezone(BEIJING_TIMEZONE)


def at_beijing_time(day: datetime, hour: int, minute: int = 0) -> datetime:
    local = beijing_now(day)
    return datetime.combine(local.date(), time(hour, minute), tzinfo=BEIJING_TIMEZONE)


def parse_cn_date(value: str | None) -> datetime | None:
    """Parse ``2025年10月22日`` style dates into Beijing midnight."""
    if not value:
        return None
    text = "".join(value.split())
    for fmt in CN_DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=BEIJING_TIMEZONE)
    return None


def parse_iso_day_at(value: str | None, *, hour: int, minute: int = 0) -> datetime | None:
    """Parse the leading ``YYYY-MM-DD`` token of ``value`` at a fixed Beijing time."""
    if not value:
        return None
    tokens = value.strip().split()
    if not tokens:
        return None
    try:
        day = datetime.strptime(tokens[0], ISO_DATE_FORMAT)
    except ValueError:
        return None
    return datetime.combine(day.date(), time(hour, minute), tzinfo=BEIJING_TIMEZONE)
