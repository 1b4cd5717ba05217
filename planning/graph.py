# planning/graph.py
"""
Модуль графа задач: нормализация входных данных и топологическая сортировка
"""
import logging
from collections.abc import Mapping
from dataclasses import replace

from config import DEFAULT_ESTIMATED_HOURS, DEFAULT_RESOURCE_CAPACITY
from planning.calendar import to_date
from planning.errors import CircularDependencyError, InvalidTaskError, InvalidResourceError
from planning.models import Task, Resource, TaskType

logger = logging.getLogger(__name__)

_MISSING = object()


def _field(record, *keys, default=_MISSING):
    """Returns the first present key of a record (snake_case or camelCase)."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _unique_ids(values):
    """Приводит идентификаторы к строкам и убирает дубликаты, сохраняя порядок."""
    if isinstance(values, str):
        values = [values]
    result = []
    for value in values or []:
        value_id = str(value)
        if value_id not in result:
            result.append(value_id)
    return tuple(result)


def build_task(record):
    """
    Создает задачу из записи внешней системы.

    Args:
        record: Словарь с полями задачи (snake_case или camelCase) или Task

    Returns:
        Task: Проверенная задача

    Raises:
        InvalidTaskError: Если обязательные поля отсутствуют или некорректны
    """
    if isinstance(record, Task):
        record = record.__dict__

    if not isinstance(record, Mapping):
        raise InvalidTaskError(f"Task record must be a mapping, got {type(record).__name__}")

    for required in ('id', 'name', 'start', 'end'):
        if _field(record, required) is _MISSING:
            raise InvalidTaskError(f"Task record is missing required field '{required}'")

    task_id = str(record['id'])

    try:
        start = to_date(record['start'])
        end = to_date(record['end'])
    except (TypeError, ValueError) as e:
        raise InvalidTaskError(f"Task {task_id}: invalid date ({e})") from e

    if end < start:
        raise InvalidTaskError(f"Task {task_id}: end {end} is before start {start}")

    try:
        task_type = TaskType(_field(record, 'type', default=TaskType.TASK))
    except ValueError as e:
        raise InvalidTaskError(f"Task {task_id}: unknown type {record.get('type')!r}") from e

    try:
        estimated_hours = float(_field(record, 'estimated_hours', 'estimatedHours', default=DEFAULT_ESTIMATED_HOURS))
        progress = float(_field(record, 'progress', default=0))
        display_order = int(_field(record, 'display_order', 'displayOrder', default=0))
        actual_hours = float(_field(record, 'actual_hours', 'actualHours', default=0))
    except (TypeError, ValueError) as e:
        raise InvalidTaskError(f"Task {task_id}: invalid numeric field ({e})") from e

    if estimated_hours < 0:
        raise InvalidTaskError(f"Task {task_id}: estimated hours must be non-negative")

    return Task(
        id=task_id,
        name=str(record['name']),
        start=start,
        end=end,
        type=task_type,
        progress=max(0.0, min(100.0, progress)),
        dependencies=_unique_ids(_field(record, 'dependencies', default=())),
        resources=_unique_ids(_field(record, 'resources', default=())),
        estimated_hours=estimated_hours,
        priority=_field(record, 'priority', default='medium'),
        status=_field(record, 'status', default='not-started'),
        description=_field(record, 'description', default=None),
        display_order=display_order,
        actual_hours=actual_hours,
    )


def build_tasks(records):
    return [build_task(record) for record in records or []]


def build_resource(record):
    """
    Создает ресурс из записи внешней системы.

    Raises:
        InvalidResourceError: Если нет идентификатора или емкость отрицательна
    """
    if isinstance(record, Resource):
        record = record.__dict__

    if not isinstance(record, Mapping) or _field(record, 'id') is _MISSING:
        raise InvalidResourceError("Resource record must be a mapping with an 'id'")

    resource_id = str(record['id'])
    capacity = float(_field(record, 'capacity', default=DEFAULT_RESOURCE_CAPACITY))
    if capacity < 0:
        raise InvalidResourceError(f"Resource {resource_id}: capacity must be non-negative")

    return Resource(
        id=resource_id,
        name=str(_field(record, 'name', default=resource_id)),
        capacity=capacity,
        type=_field(record, 'type', default='employee'),
        department=_field(record, 'department', default=None),
    )


def build_resources(records):
    return [build_resource(record) for record in records or []]


def ensure_tasks(tasks):
    """Пропускает готовые Task и нормализует остальные записи."""
    return [task if isinstance(task, Task) else build_task(task) for task in tasks or []]


def ensure_resources(resources):
    return [resource if isinstance(resource, Resource) else build_resource(resource)
            for resource in resources or []]


class ScheduleGraph:
    """
    Граф зависимостей между задачами.

    Ребро ``predecessor -> task`` означает, что ``predecessor`` должна
    завершиться до начала ``task``. Ссылки на отсутствующие задачи
    игнорируются с предупреждением в логе.
    """

    def __init__(self, tasks, excluded_ids=()):
        self.tasks = list(tasks)
        self.tasks_by_id = {}
        for task in self.tasks:
            if task.id in self.tasks_by_id:
                raise InvalidTaskError(f"Duplicate task id: {task.id}")
            self.tasks_by_id[task.id] = task

        excluded_ids = set(excluded_ids)
        self.predecessors = {task.id: [] for task in self.tasks}
        self.successors = {task.id: [] for task in self.tasks}

        for task in self.tasks:
            for pred_id in task.dependencies:
                if pred_id in self.tasks_by_id:
                    self.predecessors[task.id].append(pred_id)
                    self.successors[pred_id].append(task.id)
                elif pred_id in excluded_ids:
                    logger.debug(f"Задача {task.id}: зависимость {pred_id} не участвует в расчете")
                else:
                    logger.warning(f"Задача {task.id} ссылается на несуществующую задачу {pred_id}, связь пропущена")

    def __len__(self):
        return len(self.tasks)

    def task_names(self):
        return {task.id: task.name for task in self.tasks}

    def topological_order(self):
        """
        Сортирует задачи в топологическом порядке (с учетом зависимостей).

        Обход в глубину с явным стеком: зависимости идут раньше зависимых
        задач, корни берутся в порядке входного списка.

        Returns:
            List[str]: Идентификаторы задач

        Raises:
            CircularDependencyError: Если обнаружена циклическая зависимость
        """
        order = []
        visited = set()
        visiting = set()

        for root_id in self.tasks_by_id:
            if root_id in visited:
                continue

            visiting.add(root_id)
            stack = [(root_id, iter(self.predecessors[root_id]))]

            while stack:
                task_id, pending = stack[-1]
                pred_id = next(pending, None)

                if pred_id is None:
                    stack.pop()
                    visiting.discard(task_id)
                    visited.add(task_id)
                    order.append(task_id)
                    continue

                if pred_id in visiting:
                    # Цикл!
                    path = [t_id for t_id, _ in stack]
                    cycle = path[path.index(pred_id):] + [pred_id]
                    logger.error(f"Обнаружена циклическая зависимость: {' -> '.join(cycle)}")
                    raise CircularDependencyError(pred_id, cycle, self.task_names())

                if pred_id not in visited:
                    visiting.add(pred_id)
                    stack.append((pred_id, iter(self.predecessors[pred_id])))

        return order


def get_task_dependencies_graph(tasks, analysis=None):
    """
    Создает граф зависимостей между задачами для визуализации.

    Args:
        tasks: Список задач
        analysis: Результат расчета критического пути (необязательно)

    Returns:
        Словарь с данными для построения графа
    """
    critical_ids = set(analysis.critical_path) if analysis else set()
    tasks_by_id = {task.id: task for task in tasks}

    nodes = []
    edges = []

    # Создаем узлы графа
    for task in tasks:
        nodes.append({
            'id': task.id,
            'label': task.name,
            'type': task.type.value if isinstance(task.type, TaskType) else task.type,
            'is_critical': task.id in critical_ids
        })

    # Создаем ребра графа
    for task in tasks:
        for predecessor_id in task.dependencies:
            if predecessor_id in tasks_by_id:
                edges.append({
                    'from': predecessor_id,
                    'to': task.id,
                    'is_critical': predecessor_id in critical_ids and task.id in critical_ids
                })

    return {
        'nodes': nodes,
        'edges': edges
    }


def with_dates(task, start, end):
    """Возвращает копию задачи с новыми датами."""
    return replace(task, start=start, end=end)
