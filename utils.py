from datetime import date, datetime, timedelta
from decimal import Decimal
import math


def datetime_start_of(d: date):
    return datetime.combine(d, datetime.min.time())


def day_range(d: date):
    """[start, end) of a calendar day, for filtering timestamp columns."""
    start = datetime_start_of(d)
    return start, start + timedelta(days=1)


def month_range(d: date):
    start = datetime(d.year, d.month, 1)
    if d.month == 12:
        end = datetime(d.year + 1, 1, 1)
    else:
        end = datetime(d.year, d.month + 1, 1)
    return start, end


def paginate(query, page: int, per_page: int):
    total = query.order_by(None).count()
    last_page = max(1, math.ceil(total / per_page)) if per_page else 1
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return {
        "data": items,
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "last_page": last_page,
    }


def format_rupiah(amount) -> str:
    # Rp 175.000 (dot as thousands separator, no decimals)
    value = int(Decimal(amount or 0).quantize(Decimal("1")))
    return "Rp " + f"{value:,}".replace(",", ".")


def time_ago(moment: datetime, now: datetime = None) -> str:
    if moment is None:
        return ""
    now = now or datetime.now()
    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return "just now"
    for size, unit in ((86400 * 365, "year"), (86400 * 30, "month"), (86400 * 7, "week"),
                       (86400, "day"), (3600, "hour"), (60, "minute")):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count > 1 else ''} ago"
    return "just now"
