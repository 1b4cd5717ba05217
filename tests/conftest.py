from datetime import date, timedelta

import pytest

from planning.graph import build_task, build_resource

PROJECT_START = date(2025, 1, 6)


@pytest.fixture()
def day():
    def _day(offset: int) -> date:
        return PROJECT_START + timedelta(days=offset)
    return _day


@pytest.fixture()
def make_task(day):
    def _make(task_id, start=0, end=1, **fields):
        record = {
            'id': task_id,
            'name': fields.pop('name', f"Task {task_id}"),
            'start': day(start),
            'end': day(end),
        }
        record.update(fields)
        return build_task(record)
    return _make


@pytest.fixture()
def make_resource():
    def _make(resource_id, capacity=8, **fields):
        return build_resource({'id': resource_id, 'name': fields.pop('name', resource_id),
                               'capacity': capacity, **fields})
    return _make
