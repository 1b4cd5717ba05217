class SchedulingError(Exception):
    """Base class for errors raised by the planning engine."""

    pass


class CircularDependencyError(SchedulingError, ValueError):
    """Raised when the task dependencies form a cycle.

    ``task_id`` is the task at which the cycle was entered, ``cycle`` is the
    path of task ids that closes the loop.
    """

    def __init__(self, task_id, cycle, names=None):
        self.task_id = task_id
        self.cycle = list(cycle)
        names = names or {}
        path = ' -> '.join(names.get(t_id, str(t_id)) for t_id in self.cycle)
        super().__init__(f"Циклическая зависимость: {path}")


class InvalidTaskError(SchedulingError, ValueError):
    """Raised when a task record cannot be turned into a valid task."""

    pass


class InvalidResourceError(SchedulingError, ValueError):
    """Raised when a resource record cannot be turned into a valid resource."""

    pass
