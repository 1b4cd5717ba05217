import dataclasses
from dataclasses import replace
from datetime import timedelta

import pytest

from planning.baseline import create_baseline, compare_with_baseline, summarize_comparisons
from planning.models import VarianceStatus, Variance


@pytest.fixture()
def plan(make_task):
    return [
        make_task('a', 0, 5, name='Design', progress=40),
        make_task('b', 5, 10, name='Build', dependencies=['a']),
        make_task('c', 10, 12, name='Test', dependencies=['b']),
    ]


def _shift(task, days):
    return replace(task, start=task.start + timedelta(days=days), end=task.end + timedelta(days=days))


def test_comparing_with_own_baseline_is_on_track(plan) -> None:
    comparisons = compare_with_baseline(plan, create_baseline(plan, "x"))

    assert len(comparisons) == 3
    for comparison in comparisons:
        assert comparison.variance == Variance(start=0, end=0, progress=0)
        assert comparison.status is VarianceStatus.ON_TRACK


def test_baseline_is_an_immutable_copy(plan) -> None:
    baseline = create_baseline(plan, "Kick-off")

    plan[0] = replace(plan[0], name='Renamed')

    assert baseline.tasks[0].name == 'Design'
    assert baseline.id.startswith('baseline-')
    assert baseline.description.startswith('Baseline created on ')
    with pytest.raises(dataclasses.FrozenInstanceError):
        baseline.name = 'Other'


def test_comparison_cannot_alter_the_baseline(plan) -> None:
    baseline = create_baseline(plan, "v1")
    comparison = compare_with_baseline(plan, baseline)[0]

    with pytest.raises(dataclasses.FrozenInstanceError):
        comparison.baseline.end = comparison.baseline.end + timedelta(days=30)
    with pytest.raises(dataclasses.FrozenInstanceError):
        comparison.current.progress = 100

    again = compare_with_baseline(plan, baseline)
    assert all(item.status is VarianceStatus.ON_TRACK for item in again)
    assert all(item.variance == Variance() for item in again)


def test_late_task_is_behind(plan) -> None:
    baseline = create_baseline(plan, "v1")
    current = [plan[0], _shift(plan[1], 5), plan[2]]

    comparison = compare_with_baseline(current, baseline)[1]

    assert comparison.variance.start == 5
    assert comparison.variance.end == 5
    assert comparison.status is VarianceStatus.BEHIND


def test_early_task_is_ahead(plan) -> None:
    baseline = create_baseline(plan, "v1")

    comparison = compare_with_baseline([_shift(plan[2], -3)], baseline)[0]

    assert comparison.variance.end == -3
    assert comparison.status is VarianceStatus.AHEAD


def test_small_slip_is_tolerated(plan) -> None:
    baseline = create_baseline(plan, "v1")

    comparison = compare_with_baseline([_shift(plan[1], 2)], baseline)[0]

    assert comparison.variance.start == 2
    assert comparison.status is VarianceStatus.ON_TRACK


def test_rename_or_longer_duration_is_scope_change(plan) -> None:
    baseline = create_baseline(plan, "v1")
    renamed = replace(plan[0], name='Design v2')
    stretched = replace(plan[1], end=plan[1].end + timedelta(days=3))

    comparisons = compare_with_baseline([renamed, stretched], baseline)

    assert comparisons[0].status is VarianceStatus.SCOPE_CHANGED
    assert comparisons[1].variance.end == 3
    assert comparisons[1].status is VarianceStatus.SCOPE_CHANGED


def test_progress_variance(plan) -> None:
    baseline = create_baseline(plan, "v1")

    comparison = compare_with_baseline([replace(plan[0], progress=75)], baseline)[0]

    assert comparison.variance.progress == 35
    assert comparison.status is VarianceStatus.ON_TRACK


def test_new_task_is_scope_change_and_removed_task_is_not_reported(plan, make_task) -> None:
    baseline = create_baseline(plan, "v1")
    current = [plan[0], make_task('d', 12, 14, name='Deploy')]

    comparisons = compare_with_baseline(current, baseline)

    assert [comparison.task_id for comparison in comparisons] == ['a', 'd']
    added = comparisons[1]
    assert added.baseline is None
    assert added.variance == Variance()
    assert added.status is VarianceStatus.SCOPE_CHANGED


def test_missing_baseline_yields_nothing(plan) -> None:
    assert compare_with_baseline(plan, None) == []


def test_summary_counts_every_status(plan) -> None:
    baseline = create_baseline(plan, "v1")
    current = [plan[0], _shift(plan[1], 4), replace(plan[2], name='QA')]

    summary = summarize_comparisons(compare_with_baseline(current, baseline))

    assert summary == {'on-track': 1, 'ahead': 0, 'behind': 1, 'scope-changed': 1}
