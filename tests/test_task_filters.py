from utils.task_filters import TaskFilter, filter_tasks, calculate_project_progress


def _ids(tasks):
    return [task.id for task in tasks]


def test_default_filter_hides_cancelled(make_task) -> None:
    tasks = [
        make_task('a', status='completed'),
        make_task('b', status='cancelled'),
        make_task('c', status='on-hold'),
    ]

    assert _ids(filter_tasks(tasks)) == ['a', 'c']
    assert _ids(filter_tasks(tasks, TaskFilter(show_completed=False, show_on_hold=False))) == []


def test_filter_by_resource_priority_and_progress(make_task) -> None:
    tasks = [
        make_task('a', resources=['dev'], priority='high', progress=10),
        make_task('b', resources=['ops'], priority='low', progress=90),
        make_task('c', resources=['dev', 'ops'], priority='critical', progress=50),
    ]

    assert _ids(filter_tasks(tasks, TaskFilter(resource_ids=['dev']))) == ['a', 'c']
    assert _ids(filter_tasks(tasks, TaskFilter(priorities=['low', 'critical']))) == ['b', 'c']
    assert _ids(filter_tasks(tasks, TaskFilter(progress_range=(20, 60)))) == ['c']


def test_filter_by_date_ranges(make_task, day) -> None:
    tasks = [make_task('a', 0, 2), make_task('b', 3, 8), make_task('c', 6, 7)]

    assert _ids(filter_tasks(tasks, TaskFilter(start_date_range=(day(1), None)))) == ['b', 'c']
    assert _ids(filter_tasks(tasks, TaskFilter(end_date_range=(None, day(7))))) == ['a', 'c']


def test_search_matches_name_and_description(make_task) -> None:
    tasks = [
        make_task('a', name='Pour concrete'),
        make_task('b', name='Install windows', description='Order glass from CONCRETE supplier'),
        make_task('c', name='Paint'),
    ]

    assert _ids(filter_tasks(tasks, TaskFilter(search_text='concrete'))) == ['a', 'b']


def test_project_progress_is_weighted_by_hours(make_task) -> None:
    tasks = [
        make_task('a', progress=100, estimated_hours=30),
        make_task('b', progress=0, estimated_hours=10),
        make_task('m', type='milestone', progress=0, estimated_hours=100),
    ]

    assert calculate_project_progress(tasks) == 75


def test_tasks_without_hours_weigh_one(make_task) -> None:
    tasks = [
        make_task('a', progress=60, estimated_hours=0),
        make_task('b', progress=20, estimated_hours=0),
    ]

    assert calculate_project_progress(tasks) == 40
    assert calculate_project_progress([]) == 0
