from datetime import datetime, timedelta, timezone

import pytest

from repo_dashboard.models import RepositoryRecord

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days):
    return NOW - timedelta(days=days)


def make_record(**overrides):
    data = {
        "id": 1,
        "user_id": 7,
        "name": "sample",
        "full_name": "octo/sample",
        "pushed_at": days_ago(1),
    }
    data.update(overrides)
    if "full_name" not in overrides:
        data["full_name"] = f"octo/{data['name']}"
    return RepositoryRecord(**data)


def github_payload(**overrides):
    payload = {
        "id": 101,
        "name": "budget-app",
        "full_name": "octo/budget-app",
        "description": "Personal finance tracker",
        "html_url": "https://github.com/octo/budget-app",
        "homepage": "",
        "private": False,
        "fork": False,
        "archived": False,
        "is_template": False,
        "stargazers_count": 3,
        "watchers_count": 3,
        "forks_count": 1,
        "open_issues_count": 2,
        "language": "TypeScript",
        "topics": ["finance"],
        "created_at": "2023-01-01T00:00:00Z",
        "updated_at": "2024-05-30T00:00:00Z",
        "pushed_at": "2024-05-30T00:00:00Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def now():
    return NOW
