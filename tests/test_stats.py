from conftest import NOW, days_ago, make_record
from repo_dashboard.models import RepoStatus
from repo_dashboard.stats import compute_dashboard_stats


def _records():
    return [
        make_record(id=1, name="a", status=RepoStatus.ACTIVE, language="Python", stargazers_count=4,
                    priority_score=60, pushed_at=days_ago(2)),
        make_record(id=2, name="b", status=RepoStatus.ACTIVE, language="Python", is_private=True,
                    priority_score=40, pushed_at=days_ago(1)),
        make_record(id=3, name="c", status=RepoStatus.MAINTAINED, language="Go", forks_count=2,
                    priority_score=30, pushed_at=days_ago(20)),
        make_record(id=4, name="d", status=RepoStatus.ARCHIVED, is_archived=True, priority_score=99,
                    open_issues_count=3),
        make_record(id=5, name="e", status=RepoStatus.ACTIVE, user_status=RepoStatus.DEPRECATED,
                    is_fork=True, priority_score=20),
    ]


def test_counts_and_totals():
    stats = compute_dashboard_stats(_records(), last_sync_at=NOW)["stats"]
    assert stats["total_repos"] == 5
    assert stats["active_repos"] == 2
    assert stats["maintained_repos"] == 1
    assert stats["archived_repos"] == 1
    assert stats["deprecated_repos"] == 1
    assert stats["public_repos"] == 4
    assert stats["private_repos"] == 1
    assert stats["forked_repos"] == 1
    assert (stats["total_stars"], stats["total_forks"], stats["total_open_issues"]) == (4, 2, 3)
    assert stats["last_sync_at"] == NOW


def test_status_distribution_skips_empty_statuses():
    distribution = compute_dashboard_stats(_records())["status_distribution"]
    assert distribution == [
        {"status": "active", "count": 2, "percentage": 40},
        {"status": "maintained", "count": 1, "percentage": 20},
        {"status": "archived", "count": 1, "percentage": 20},
    ]


def test_language_distribution():
    assert compute_dashboard_stats(_records())["language_distribution"] == [
        {"language": "Python", "count": 2},
        {"language": "Go", "count": 1},
    ]


def test_top_priority_excludes_archived():
    top = compute_dashboard_stats(_records())["top_priority_repos"]
    assert [r.id for r in top] == [1, 2, 3, 5]


def test_active_projects_most_recent_first():
    active = compute_dashboard_stats(_records())["active_projects"]
    assert [r.id for r in active] == [2, 1, 3]


def test_empty():
    dashboard = compute_dashboard_stats([])
    assert dashboard["stats"]["total_repos"] == 0
    assert dashboard["status_distribution"] == []
    assert dashboard["top_priority_repos"] == []


def test_archived_repo_with_user_status_counts_as_archived():
    records = [make_record(id=1, status=RepoStatus.ARCHIVED, is_archived=True, user_status=RepoStatus.DEPRECATED)]
    stats = compute_dashboard_stats(records)["stats"]
    assert stats["archived_repos"] == 1
    assert stats["deprecated_repos"] == 0
