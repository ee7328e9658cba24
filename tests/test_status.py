import math
from datetime import timedelta

import pytest

from conftest import NOW, days_ago, make_record
from repo_dashboard.models import RepoStatus
from repo_dashboard.status import classify_status, days_since, get_status_description, get_status_metrics


@pytest.mark.parametrize(
    "days, expected",
    [
        (0, RepoStatus.ACTIVE),
        (7, RepoStatus.ACTIVE),
        (8, RepoStatus.MAINTAINED),
        (30, RepoStatus.MAINTAINED),
        (31, RepoStatus.STALE),
        (90, RepoStatus.STALE),
        (91, RepoStatus.ABANDONED),
        (1000, RepoStatus.ABANDONED),
    ],
)
def test_bucket_boundaries(days, expected):
    assert classify_status(make_record(pushed_at=days_ago(days)), NOW) == expected


def test_never_pushed_is_abandoned():
    assert classify_status(make_record(pushed_at=None), NOW) == RepoStatus.ABANDONED


def test_archived_takes_precedence():
    assert classify_status(make_record(is_archived=True, pushed_at=days_ago(1)), NOW) == RepoStatus.ARCHIVED
    assert classify_status(make_record(is_archived=True, pushed_at=None), NOW) == RepoStatus.ARCHIVED


def test_status_never_becomes_less_inactive_as_days_grow():
    order = [RepoStatus.ACTIVE, RepoStatus.MAINTAINED, RepoStatus.STALE, RepoStatus.ABANDONED]
    ranks = [order.index(classify_status(make_record(pushed_at=days_ago(d)), NOW)) for d in range(0, 200)]
    assert ranks == sorted(ranks)


def test_partial_days_are_floored():
    # 7 days and 23 hours is still day 7
    record = make_record(pushed_at=days_ago(8) + timedelta(hours=1))
    assert days_since(record.pushed_at, NOW) == 7
    assert classify_status(record, NOW) == RepoStatus.ACTIVE


def test_days_since_missing_is_infinite():
    assert days_since(None, NOW) == math.inf


def test_status_metrics():
    record = make_record(pushed_at=days_ago(10), updated_at=days_ago(2))
    metrics = get_status_metrics(record, NOW)
    assert metrics == {"days_since_last_push": 10, "days_since_last_update": 2, "is_archived": False}


def test_status_description():
    assert get_status_description(RepoStatus.ABANDONED) == "No updates in 90+ days"
    assert get_status_description("bogus") == "Unknown status"
