# src/repo_dashboard/sync.py
"""
Synchronization of a user's GitHub repositories into the local store,
and write-back of generated topics.
"""
import logging
import time
from datetime import datetime, timezone

from .exceptions import GithubError
from .github_client import request_with_backoff
from .models import RepositoryRecord, SyncResult, TopicResult
from .scoring import calculate_health_score, calculate_priority_score
from .status import classify_status
from .topics import generate_topics_for_repo, sanitize_topics

logger = logging.getLogger(__name__)


def build_record(payload, user_id, now):
    """Turn a GitHub payload into a classified and scored RepositoryRecord."""
    record = RepositoryRecord.from_github(payload, user_id)
    record.status = classify_status(record, now)
    record.priority_score = calculate_priority_score(record, record.status, now)
    record.health_score = calculate_health_score(record, record.status)
    record.last_sync_at = now
    return record


def sync_repositories(user_id, client, store, now=None, retries=3, sleep=time.sleep):
    """
    Fetch all of a user's repositories from GitHub and upsert them into the store.

    GitHub failures never raise; they come back as an unsuccessful SyncResult.
    """
    with store.user_lock(user_id):
        now = now or datetime.now(timezone.utc)
        try:
            payloads = request_with_backoff(client.list_user_repositories, retries=retries, sleep=sleep)
        except GithubError as e:
            logger.error("Sync failed for user %s: %s", user_id, e)
            return SyncResult(success=False, error=str(e))

        new_repos = 0
        updated_repos = 0
        for payload in payloads:
            try:
                record = build_record(payload, user_id, now)
            except (KeyError, TypeError, ValueError) as e:
                name = payload.get("full_name") if isinstance(payload, dict) else payload
                logger.warning("Skipping malformed repository payload %r: %s", name, e)
                continue
            if store.upsert(record, save=False) == "created":
                new_repos += 1
            else:
                updated_repos += 1

        # Writes the store once for the whole run
        store.mark_user_synced(user_id, now)
        logger.info(
            "Synced %d repositories for user %s (%d new, %d updated)",
            len(payloads), user_id, new_repos, updated_repos,
        )
        return SyncResult(
            success=True,
            total_repos=len(payloads),
            new_repos=new_repos,
            updated_repos=updated_repos,
        )


def get_sync_status(user_id, store):
    return {
        "last_sync_at": store.last_sync_at(user_id),
        "repo_count": len(store.list_for_user(user_id)),
    }


def _select(records, repo_ids):
    if not repo_ids:
        return records
    wanted = set(repo_ids)
    return [r for r in records if r.id in wanted]


def preview_topics(user_id, store, repo_ids=None):
    """Suggested topics per repository, without touching GitHub."""
    results = []
    for record in _select(store.list_for_user(user_id), repo_ids):
        suggested = sanitize_topics(generate_topics_for_repo(record))
        if suggested:
            results.append(TopicResult(
                repo_id=record.id,
                repo_name=record.name,
                full_name=record.full_name,
                suggested_topics=suggested,
            ))
    return results


def apply_topics(user_id, client, store, repo_ids=None, retries=3, sleep=time.sleep):
    """
    Replace the topics of each selected repository on GitHub with the generated ones.

    Each repository is reported on its own; one failure does not stop the rest.
    """
    results = []
    for result in preview_topics(user_id, store, repo_ids):
        owner, _, name = result.full_name.partition("/")
        try:
            request_with_backoff(
                lambda: client.replace_repository_topics(owner, name, result.suggested_topics),
                retries=retries,
                sleep=sleep,
            )
        except GithubError as e:
            logger.warning("Could not set topics for %s: %s", result.full_name, e)
            result.error = str(e)
        else:
            store.update_topics(user_id, result.repo_id, result.suggested_topics)
            result.applied = True
        results.append(result)

    applied = len([r for r in results if r.applied])
    logger.info("Applied topics to %d of %d repositories", applied, len(results))
    return results
