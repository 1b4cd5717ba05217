from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import List, Dict, Optional, Tuple


class TaskType(str, Enum):
    TASK = 'task'
    MILESTONE = 'milestone'
    PROJECT = 'project'


class ConflictSeverity(str, Enum):
    MINOR = 'minor'
    MAJOR = 'major'
    CRITICAL = 'critical'


class VarianceStatus(str, Enum):
    ON_TRACK = 'on-track'
    AHEAD = 'ahead'
    BEHIND = 'behind'
    SCOPE_CHANGED = 'scope-changed'


@dataclass(frozen=True)
class Task:
    """Модель задачи."""
    id: str
    name: str
    start: date
    end: date
    type: TaskType = TaskType.TASK
    progress: float = 0
    dependencies: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    estimated_hours: float = 0
    priority: str = 'medium'
    status: str = 'not-started'
    description: Optional[str] = None
    display_order: int = 0
    actual_hours: float = 0


@dataclass
class Resource:
    """Модель ресурса (сотрудника)."""
    id: str
    name: str
    capacity: float = 8
    type: str = 'employee'
    department: Optional[str] = None


@dataclass
class CriticalPathNode:
    """Параметры сетевой модели для одной задачи."""
    task_id: str
    earliest_start: date
    earliest_finish: date
    latest_start: date
    latest_finish: date
    total_float: int = 0
    is_critical: bool = False


@dataclass
class CriticalPathAnalysis:
    """Результат расчета критического пути."""
    nodes: List[CriticalPathNode]
    critical_path: List[str]
    project_duration: int
    project_start: date
    project_end: date

    def node(self, task_id: str) -> Optional[CriticalPathNode]:
        return next((node for node in self.nodes if node.task_id == task_id), None)

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ResourceConflict:
    """Перегрузка ресурса в конкретный день."""
    resource_id: str
    resource_name: str
    date: date
    conflicting_tasks: List[str]
    allocated_hours: float
    total_allocation: Optional[int]
    severity: ConflictSeverity

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class TaskAllocation:
    task_id: str
    task_name: str
    allocation: float


@dataclass
class ResourceUtilization:
    """Загрузка ресурса за период."""
    resource_id: str
    resource_name: str
    total_capacity: float = 0
    total_allocated: float = 0
    utilization_rate: float = 0
    tasks: List[TaskAllocation] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Baseline:
    """Базовый план: неизменяемый снимок задач."""
    id: str
    name: str
    created_at: datetime
    tasks: Tuple[Task, ...]
    description: str = ''


@dataclass(frozen=True)
class Variance:
    start: int = 0
    end: int = 0
    progress: float = 0


@dataclass
class BaselineComparison:
    """Отклонение задачи от базового плана."""
    task_id: str
    current: Task
    baseline: Optional[Task]
    variance: Variance
    status: VarianceStatus

    def to_dict(self) -> Dict:
        return asdict(self)
