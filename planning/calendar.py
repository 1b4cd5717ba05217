"""
Календарная арифметика задач.

A task occupies ``duration_days(start, end)`` calendar days beginning at
``start``. ``end`` is the exclusive boundary, so a successor may start on its
predecessor's ``end`` date; a task whose ``end`` equals its ``start`` still
occupies one day.
"""
from datetime import date, datetime, timedelta


def to_date(value):
    """
    Converts a date-like value to a ``date``.

    Args:
        value: ``date``, ``datetime`` or an ISO-8601 string

    Returns:
        date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    raise TypeError(f"Cannot convert {value!r} to a date")


def nominal_days(start, end):
    """Разница между окончанием и началом в днях, без нормализации."""
    return (end - start).days


def duration_days(start, end):
    """Длительность в днях; задача не может длиться меньше одного дня."""
    return max(1, nominal_days(start, end))


def span_end(start, end):
    """Exclusive end of the occupied span."""
    return start + timedelta(days=duration_days(start, end))


def iter_task_days(start, end):
    """
    Перебирает календарные дни, занятые задачей.

    Args:
        start: Дата начала
        end: Дата окончания

    Yields:
        date: Каждый занятый день
    """
    current_date = start
    last_date = span_end(start, end)
    while current_date < last_date:
        yield current_date
        current_date += timedelta(days=1)


def overlap_days(start_a, end_a, start_b, end_b):
    """
    Counts the days occupied by both spans.

    Returns:
        int: Number of shared days, 0 when the spans do not intersect
    """
    overlap_start = max(start_a, start_b)
    overlap_end = min(span_end(start_a, end_a), span_end(start_b, end_b))
    return max(0, (overlap_end - overlap_start).days)


def calculate_task_end_date(start_date, duration):
    """
    Вычисляет дату окончания задачи.

    Args:
        start_date: Дата начала задачи
        duration: Длительность в днях

    Returns:
        date: Дата окончания (не раньше следующего дня после начала)
    """
    return start_date + timedelta(days=max(1, duration))
