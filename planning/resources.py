"""
Resource load: per-day over-allocation detection and utilization over a window.
"""
import logging
from collections import defaultdict

from config import MINOR_OVERALLOCATION_RATIO, MAJOR_OVERALLOCATION_RATIO
from planning.calendar import duration_days, iter_task_days, overlap_days, to_date
from planning.graph import ensure_tasks, ensure_resources
from planning.models import (
    ConflictSeverity, ResourceConflict, ResourceUtilization, TaskAllocation
)

logger = logging.getLogger(__name__)

# Float tolerance for hour sums
EPSILON = 1e-9


def daily_hours(task):
    """Hours per occupied day, assuming an even spread over the task span."""
    return task.estimated_hours / duration_days(task.start, task.end)


def add_task_load(load, task, resources_by_id):
    """
    Adds the task's daily hours to the per-resource load map.

    Args:
        load: Dict {resource_id: {date: hours}}
        task: Task to add
        resources_by_id: Known resources; other ids are skipped
    """
    hours = daily_hours(task)
    for resource_id in task.resources:
        if resource_id not in resources_by_id:
            continue
        resource_load = load.setdefault(resource_id, defaultdict(float))
        for day in iter_task_days(task.start, task.end):
            resource_load[day] += hours
    return load


def get_resource_load(tasks, resources):
    """
    Builds the daily load of every resource.

    Returns:
        Dict {resource_id: {date: allocated hours}}
    """
    tasks = ensure_tasks(tasks)
    resources_by_id = {resource.id: resource for resource in ensure_resources(resources)}

    load = {}
    for task in tasks:
        add_task_load(load, task, resources_by_id)

    return {resource_id: dict(days) for resource_id, days in load.items()}


def classify_severity(allocated_hours, capacity):
    """
    Classifies an over-allocation.

    minor: up to 120% of capacity, major: up to 150%, critical: above.
    """
    if allocated_hours <= capacity * MINOR_OVERALLOCATION_RATIO + EPSILON:
        return ConflictSeverity.MINOR
    if allocated_hours <= capacity * MAJOR_OVERALLOCATION_RATIO + EPSILON:
        return ConflictSeverity.MAJOR
    return ConflictSeverity.CRITICAL


def detect_resource_conflicts(tasks, resources):
    """
    Detects days on which a resource is allocated beyond its capacity.

    Each task's estimated hours are spread evenly over the days it occupies
    and summed per (resource, date). Resource ids missing from the roster are
    skipped, since there is no capacity to compare against.

    Args:
        tasks: Tasks with resources, dates and estimated hours
        resources: Resource roster

    Returns:
        List[ResourceConflict] ordered by roster position, then date
    """
    tasks = ensure_tasks(tasks)
    resources = ensure_resources(resources)
    resources_by_id = {resource.id: resource for resource in resources}

    # resource_id -> date -> {'hours': float, 'tasks': [task ids]}
    allocations = defaultdict(dict)

    for task in tasks:
        if not task.resources:
            continue

        hours = daily_hours(task)
        for resource_id in task.resources:
            if resource_id not in resources_by_id:
                logger.debug(f"Task {task.id}: unknown resource {resource_id} skipped")
                continue

            resource_allocations = allocations[resource_id]
            for day in iter_task_days(task.start, task.end):
                bucket = resource_allocations.setdefault(day, {'hours': 0.0, 'tasks': []})
                bucket['hours'] += hours
                bucket['tasks'].append(task.id)

    conflicts = []
    for resource in resources:
        capacity = resource.capacity
        for day in sorted(allocations.get(resource.id, {})):
            bucket = allocations[resource.id][day]
            allocated = bucket['hours']
            if allocated <= capacity + EPSILON:
                continue

            if capacity > 0:
                total_allocation = round(allocated / capacity * 100)
                severity = classify_severity(allocated, capacity)
            else:
                total_allocation = None
                severity = ConflictSeverity.CRITICAL

            conflicts.append(ResourceConflict(
                resource_id=resource.id,
                resource_name=resource.name,
                date=day,
                conflicting_tasks=list(bucket['tasks']),
                allocated_hours=allocated,
                total_allocation=total_allocation,
                severity=severity
            ))

    if conflicts:
        logger.info(f"Found {len(conflicts)} resource conflicts across "
                    f"{len({conflict.resource_id for conflict in conflicts})} resources")
    return conflicts


def calculate_resource_utilization(tasks, resources, start_date, end_date):
    """
    Calculates resource utilization over a date window.

    Only the part of a task that falls inside the window counts, pro-rated
    by ``overlap_days / task_days``. Utilization is 0 for zero capacity.

    Args:
        tasks: Tasks to aggregate
        resources: Resource roster
        start_date: Window start
        end_date: Window end

    Returns:
        List[ResourceUtilization] in roster order
    """
    start_date = to_date(start_date)
    end_date = to_date(end_date)
    if end_date < start_date:
        raise ValueError(f"Window end {end_date} is before start {start_date}")

    tasks = ensure_tasks(tasks)
    resources = ensure_resources(resources)
    window_days = duration_days(start_date, end_date)

    utilization = {
        resource.id: ResourceUtilization(
            resource_id=resource.id,
            resource_name=resource.name,
            total_capacity=resource.capacity * window_days
        )
        for resource in resources
    }

    for task in tasks:
        if not task.resources:
            continue

        overlap = overlap_days(task.start, task.end, start_date, end_date)
        if overlap == 0:
            continue

        allocation = task.estimated_hours * overlap / duration_days(task.start, task.end)
        for resource_id in task.resources:
            util = utilization.get(resource_id)
            if util is None:
                continue
            util.total_allocated += allocation
            util.tasks.append(TaskAllocation(task_id=task.id, task_name=task.name, allocation=allocation))

    for util in utilization.values():
        if util.total_capacity > 0:
            util.utilization_rate = util.total_allocated / util.total_capacity * 100
        else:
            util.utilization_rate = 0

    return list(utilization.values())
