"""
Task filtering and project progress for reporting views.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from planning.graph import ensure_tasks
from planning.models import TaskType


@dataclass
class TaskFilter:
    """Фильтр задач (по умолчанию отмененные задачи скрыты)."""
    show_completed: bool = True
    show_on_hold: bool = True
    show_cancelled: bool = False
    resource_ids: List[str] = field(default_factory=list)
    start_date_range: Optional[Tuple] = None
    end_date_range: Optional[Tuple] = None
    priorities: List[str] = field(default_factory=lambda: ['low', 'medium', 'high', 'critical'])
    progress_range: Tuple[float, float] = (0, 100)
    search_text: Optional[str] = None


def _in_range(value, date_range):
    """Checks an optional (from, to) range; either bound may be None."""
    if not date_range:
        return True
    range_start, range_end = date_range
    if range_start is not None and value < range_start:
        return False
    if range_end is not None and value > range_end:
        return False
    return True


def matches_filter(task, task_filter):
    # Status filter
    if not task_filter.show_completed and task.status == 'completed':
        return False
    if not task_filter.show_on_hold and task.status == 'on-hold':
        return False
    if not task_filter.show_cancelled and task.status == 'cancelled':
        return False

    # Resource filter
    if task_filter.resource_ids and not any(resource_id in task_filter.resource_ids
                                            for resource_id in task.resources):
        return False

    # Date range filters
    if not _in_range(task.start, task_filter.start_date_range):
        return False
    if not _in_range(task.end, task_filter.end_date_range):
        return False

    if task_filter.priorities and task.priority not in task_filter.priorities:
        return False

    min_progress, max_progress = task_filter.progress_range
    if task.progress < min_progress or task.progress > max_progress:
        return False

    if task_filter.search_text:
        search = task_filter.search_text.lower()
        return search in task.name.lower() or search in (task.description or '').lower()

    return True


def filter_tasks(tasks, task_filter=None):
    """
    Applies a TaskFilter to a task list.

    Args:
        tasks: Tasks to filter
        task_filter: TaskFilter, defaults to TaskFilter()

    Returns:
        List of matching tasks in input order
    """
    task_filter = task_filter or TaskFilter()
    return [task for task in ensure_tasks(tasks) if matches_filter(task, task_filter)]


def calculate_project_progress(tasks):
    """
    Calculates project progress weighted by estimated hours.

    Only tasks of type ``task`` count; a task without hours weighs 1.

    Returns:
        int: Progress in percent, 0 when there are no work tasks
    """
    work_tasks = [task for task in ensure_tasks(tasks) if task.type == TaskType.TASK]
    if not work_tasks:
        return 0

    weights = [(task.progress, task.estimated_hours or 1) for task in work_tasks]
    total_weight = sum(weight for _, weight in weights)
    weighted_progress = sum(progress * weight for progress, weight in weights)

    return round(weighted_progress / total_weight)
