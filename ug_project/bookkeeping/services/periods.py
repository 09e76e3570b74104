import datetime

from django.core.exceptions import ValidationError

CADENCES = ("weekly", "monthly")


def _check(cadence):
    if cadence not in CADENCES:
        raise ValidationError(f"Unknown planner cadence: {cadence}")


def period_start(cadence, day):
    """Monday of the week, or the 1st of the month, containing `day`."""
    _check(cadence)
    if cadence == "weekly":
        return day - datetime.timedelta(days=day.weekday())
    return day.replace(day=1)


def previous_period(cadence, day):
    """
    (start, end) of the full week / month just before the period
    containing `day`. Both ends are inclusive.
    """
    start = period_start(cadence, day)
    end = start - datetime.timedelta(days=1)
    if cadence == "weekly":
        return end - datetime.timedelta(days=6), end
    return end.replace(day=1), end
