# planning/network.py
"""
Модуль для расчета параметров сетевой модели и определения критического пути
"""
from datetime import date, timedelta

from logger import logger
from planning.calendar import duration_days
from planning.graph import ScheduleGraph, ensure_tasks
from planning.models import CriticalPathAnalysis, CriticalPathNode, TaskType


def calculate_critical_path(tasks):
    """
    Рассчитывает параметры сетевой модели (метод критического пути).

    В расчете участвуют только задачи типа ``task``; вехи и проекты
    пропускаются. Зависимости от отсутствующих задач игнорируются.

    Args:
        tasks: Список задач (Task или словари)

    Returns:
        CriticalPathAnalysis

    Raises:
        CircularDependencyError: Если зависимости образуют цикл
    """
    tasks = ensure_tasks(tasks)
    work_tasks = [task for task in tasks if task.type == TaskType.TASK]

    if not work_tasks:
        logger.warning("Нет задач для расчета сетевой модели")
        today = date.today()
        return CriticalPathAnalysis(
            nodes=[],
            critical_path=[],
            project_duration=0,
            project_start=today,
            project_end=today
        )

    excluded_ids = {task.id for task in tasks if task.type != TaskType.TASK}

    # Создаем сетевую модель
    graph = ScheduleGraph(work_tasks, excluded_ids=excluded_ids)
    order = graph.topological_order()
    network = create_network_model(graph)

    # Рассчитываем ранние сроки начала и окончания
    calculate_early_times(network, graph, order)

    project_start = min(row['early_start'] for row in network.values())
    project_end = max(row['early_finish'] for row in network.values())

    # Рассчитываем поздние сроки начала и окончания
    calculate_late_times(network, graph, order, project_end)

    # Рассчитываем резервы времени
    calculate_reserves(network)

    # Определяем критический путь
    critical_path = identify_critical_path(network, order)

    nodes = [
        CriticalPathNode(
            task_id=task.id,
            earliest_start=network[task.id]['early_start'],
            earliest_finish=network[task.id]['early_finish'],
            latest_start=network[task.id]['late_start'],
            latest_finish=network[task.id]['late_finish'],
            total_float=network[task.id]['reserve'],
            is_critical=network[task.id]['is_critical']
        )
        for task in work_tasks
    ]

    project_duration = (project_end - project_start).days
    logger.info(f"Рассчитана сетевая модель: {len(nodes)} задач, проект: {project_duration} дней")
    logger.info(f"Критический путь: {critical_path}")

    return CriticalPathAnalysis(
        nodes=nodes,
        critical_path=critical_path,
        project_duration=project_duration,
        project_start=project_start,
        project_end=project_end
    )


def create_network_model(graph):
    """
    Создает сетевую модель на основе графа задач.

    Returns:
        Словарь id -> параметры узла сетевой модели
    """
    network = {}

    for task in graph.tasks:
        network[task.id] = {
            'id': task.id,
            'name': task.name,
            'start': task.start,
            'duration': duration_days(task.start, task.end),
            'early_start': None,
            'early_finish': None,
            'late_start': None,
            'late_finish': None,
            'is_critical': False,
            'reserve': 0
        }

    logger.debug(f"Создана сетевая модель: {len(network)} задач")
    return network


def calculate_early_times(network, graph, order):
    """
    Рассчитывает ранние сроки начала и окончания для всех работ.

    Args:
        network: Сетевая модель
        graph: Граф зависимостей
        order: Топологический порядок задач
    """
    for task_id in order:
        row = network[task_id]
        predecessors = graph.predecessors[task_id]

        # Без предшественников задача начинается в свою дату начала
        if not predecessors:
            row['early_start'] = row['start']
        else:
            # Иначе ранний срок начала = максимум из ранних сроков окончания предшественников
            row['early_start'] = max(network[pred_id]['early_finish'] for pred_id in predecessors)

        row['early_finish'] = row['early_start'] + timedelta(days=row['duration'])

    return network


def calculate_late_times(network, graph, order, project_end):
    """
    Рассчитывает поздние сроки начала и окончания для всех работ.

    Args:
        network: Сетевая модель с ранними сроками
        graph: Граф зависимостей
        order: Топологический порядок задач
        project_end: Дата окончания проекта
    """
    # Обрабатываем задачи в обратном порядке
    for task_id in reversed(order):
        row = network[task_id]
        successors = graph.successors[task_id]

        if successors:
            # Поздний срок окончания = минимум из поздних сроков начала последователей
            row['late_finish'] = min(network[succ_id]['late_start'] for succ_id in successors)
        else:
            row['late_finish'] = project_end

        row['late_start'] = row['late_finish'] - timedelta(days=row['duration'])

    return network


def calculate_reserves(network):
    """
    Рассчитывает полный резерв времени: поздний срок начала - ранний срок начала.
    """
    for row in network.values():
        row['reserve'] = (row['late_start'] - row['early_start']).days
        row['is_critical'] = row['reserve'] <= 0

    return network


def identify_critical_path(network, order):
    """
    Определяет критический путь в сетевой модели.

    Returns:
        Список id критических задач, упорядоченный по раннему сроку начала
    """
    position = {task_id: index for index, task_id in enumerate(order)}
    critical_ids = [task_id for task_id in order if network[task_id]['is_critical']]
    critical_ids.sort(key=lambda task_id: (network[task_id]['early_start'], position[task_id]))

    logger.debug(f"Критические задачи: {[network[task_id]['name'] for task_id in critical_ids]}")
    return critical_ids
