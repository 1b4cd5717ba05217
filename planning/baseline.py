# planning/baseline.py
"""
Модуль базовых планов: снимок расписания и сравнение с текущим состоянием
"""
import copy
import uuid
from collections import Counter
from datetime import datetime

from config import BASELINE_VARIANCE_THRESHOLD_DAYS
from logger import logger
from planning.calendar import nominal_days
from planning.graph import ensure_tasks
from planning.models import Baseline, BaselineComparison, Variance, VarianceStatus


def create_baseline(tasks, name, description=None):
    """
    Создает базовый план.

    Args:
        tasks: Список задач на момент фиксации
        name: Название базового плана
        description: Описание (по умолчанию - дата создания)

    Returns:
        Baseline: Неизменяемый снимок с глубокими копиями задач
    """
    created_at = datetime.now()
    baseline = Baseline(
        id=f"baseline-{uuid.uuid4().hex[:12]}",
        name=name,
        created_at=created_at,
        tasks=tuple(copy.deepcopy(task) for task in ensure_tasks(tasks)),
        description=description or f"Baseline created on {created_at.strftime('%d.%m.%Y')}",
    )
    logger.info(f"Создан базовый план '{name}': {len(baseline.tasks)} задач")
    return baseline


def classify_variance(current, baseline_task, variance):
    """
    Определяет статус отклонения задачи.

    Сдвиг начала или окончания больше порога - отставание или опережение;
    смена названия или длительности больше порога - изменение объема работ.
    """
    threshold = BASELINE_VARIANCE_THRESHOLD_DAYS
    status = VarianceStatus.ON_TRACK

    if abs(variance.start) > threshold or abs(variance.end) > threshold:
        status = VarianceStatus.BEHIND if variance.end > 0 else VarianceStatus.AHEAD

    duration_change = (nominal_days(current.start, current.end)
                       - nominal_days(baseline_task.start, baseline_task.end))
    if current.name != baseline_task.name or abs(duration_change) > threshold:
        status = VarianceStatus.SCOPE_CHANGED

    return status


def compare_with_baseline(current_tasks, baseline):
    """
    Сравнивает текущие задачи с базовым планом.

    Задачи, которые есть только в базовом плане, в результат не попадают.

    Args:
        current_tasks: Текущие задачи
        baseline: Базовый план

    Returns:
        List[BaselineComparison] в порядке текущих задач
    """
    if baseline is None:
        return []

    baseline_by_id = {task.id: task for task in baseline.tasks}
    comparisons = []

    for current in ensure_tasks(current_tasks):
        baseline_task = baseline_by_id.get(current.id)

        # Новая задача, которой нет в базовом плане
        if baseline_task is None:
            comparisons.append(BaselineComparison(
                task_id=current.id,
                current=current,
                baseline=None,
                variance=Variance(),
                status=VarianceStatus.SCOPE_CHANGED
            ))
            continue

        variance = Variance(
            start=(current.start - baseline_task.start).days,
            end=(current.end - baseline_task.end).days,
            progress=current.progress - baseline_task.progress
        )

        comparisons.append(BaselineComparison(
            task_id=current.id,
            current=current,
            baseline=baseline_task,
            variance=variance,
            status=classify_variance(current, baseline_task, variance)
        ))

    logger.debug(f"Сравнение с базовым планом '{baseline.name}': {len(comparisons)} задач")
    return comparisons


def summarize_comparisons(comparisons):
    """Считает задачи по статусам отклонения."""
    counts = Counter(comparison.status for comparison in comparisons)
    return {status.value: counts.get(status, 0) for status in VarianceStatus}
