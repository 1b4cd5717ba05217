# planning/scheduler.py
"""
Автоматическое планирование задач с учетом зависимостей и загрузки ресурсов
"""
import logging
from datetime import timedelta

from config import RESOURCE_SEARCH_LIMIT_DAYS
from planning.calendar import calculate_task_end_date, duration_days, to_date
from planning.graph import ScheduleGraph, ensure_tasks, ensure_resources, with_dates
from planning.resources import EPSILON, add_task_load, daily_hours

logger = logging.getLogger(__name__)


class GreedyResourceLeveler:
    """
    Greedy single-pass resource leveling.

    For every resource a task needs, walks forward day by day from the
    earliest dependency-feasible date until the resource can take the task's
    daily hours on every day of its span, on top of the tasks already placed.
    The result is feasible but not guaranteed to have the shortest makespan.
    """

    def __init__(self, resources, search_limit=RESOURCE_SEARCH_LIMIT_DAYS):
        self.resources_by_id = {resource.id: resource for resource in ensure_resources(resources)}
        self.search_limit = search_limit

    def fits(self, resource, start, duration, hours, placed_load):
        """Checks that the resource has room for ``hours`` per day over the span."""
        resource_load = placed_load.get(resource.id, {})
        for offset in range(duration):
            day = start + timedelta(days=offset)
            if resource_load.get(day, 0) + hours > resource.capacity + EPSILON:
                return False
        return True

    def find_resource_availability(self, resource, earliest_start, duration, hours, placed_load):
        """
        Finds the first date the resource can accommodate the task.

        Returns:
            date or None when no slot is found within the search limit
        """
        check_date = earliest_start
        for _ in range(self.search_limit):
            if self.fits(resource, check_date, duration, hours, placed_load):
                return check_date
            check_date += timedelta(days=1)
        return None

    def find_start(self, task, earliest_start, placed_load):
        """
        Finds the earliest start at which every known resource of the task fits.

        Args:
            task: Task to place
            earliest_start: Earliest date allowed by dependencies
            placed_load: Dict {resource_id: {date: hours}} of already placed tasks

        Returns:
            date: Start date for the task
        """
        resources = [self.resources_by_id[resource_id]
                     for resource_id in task.resources if resource_id in self.resources_by_id]
        if not resources:
            return earliest_start

        duration = duration_days(task.start, task.end)
        hours = daily_hours(task)
        limit_date = earliest_start + timedelta(days=self.search_limit)

        search_from = earliest_start
        while search_from < limit_date:
            candidates = []
            for resource in resources:
                available = self.find_resource_availability(resource, search_from, duration, hours, placed_load)
                if available is None or available >= limit_date:
                    candidates = None
                    break
                candidates.append(available)

            if candidates is None:
                break

            candidate = max(candidates)
            # Каждый ресурс свободен со своей даты, но общий старт надо проверить еще раз
            if all(self.fits(resource, candidate, duration, hours, placed_load) for resource in resources):
                return candidate
            search_from = candidate

        logger.warning(f"No resource slot found for task {task.id} within {self.search_limit} days, "
                       f"keeping dependency start {earliest_start}")
        return earliest_start


def auto_schedule_tasks(tasks, resources, project_start, leveler=None):
    """
    Пересчитывает даты задач с учетом зависимостей и доступности ресурсов.

    Задачи обрабатываются в топологическом порядке; каждая следующая задача
    видит уже размещенные задачи. Длительность задачи сохраняется (не менее
    одного дня).

    Args:
        tasks: Список задач
        resources: Список ресурсов
        project_start: Дата, раньше которой задачи не начинаются
        leveler: Объект с методом find_start(task, earliest_start, placed_load)

    Returns:
        Новый список задач в исходном порядке

    Raises:
        CircularDependencyError: Если зависимости образуют цикл
    """
    tasks = ensure_tasks(tasks)
    resources = ensure_resources(resources)
    project_start = to_date(project_start)

    if not tasks:
        return []

    graph = ScheduleGraph(tasks)
    order = graph.topological_order()
    leveler = leveler or GreedyResourceLeveler(resources)
    resources_by_id = {resource.id: resource for resource in resources}

    scheduled = {}
    placed_load = {}

    for task_id in order:
        task = graph.tasks_by_id[task_id]

        # Проверяем ограничения по зависимостям
        earliest_start = project_start
        for pred_id in graph.predecessors[task_id]:
            earliest_start = max(earliest_start, scheduled[pred_id].end)

        # Проверяем доступность ресурсов
        start = max(earliest_start, leveler.find_start(task, earliest_start, placed_load))

        duration = duration_days(task.start, task.end)
        scheduled_task = with_dates(task, start, calculate_task_end_date(start, duration))
        scheduled[task_id] = scheduled_task
        add_task_load(placed_load, scheduled_task, resources_by_id)

        if start != task.start:
            logger.debug(f"Задача {task.name}: {task.start} -> {start}")

    moved = sum(1 for task in tasks if scheduled[task.id].start != task.start)
    logger.info(f"Автопланирование завершено: {len(tasks)} задач, перенесено {moved}")

    return [scheduled[task.id] for task in tasks]
