import json
import threading

from conftest import NOW, make_record
from repo_dashboard.models import RepoStatus
from repo_dashboard.store import RepositoryStore


def test_upsert_creates_then_updates():
    store = RepositoryStore()
    assert store.upsert(make_record(id=1)) == "created"
    assert store.upsert(make_record(id=1, stargazers_count=5)) == "updated"
    assert store.get(7, 1).stargazers_count == 5
    assert len(store.list_for_user(7)) == 1


def test_records_are_keyed_per_user():
    store = RepositoryStore()
    store.upsert(make_record(id=1, user_id=1))
    store.upsert(make_record(id=1, user_id=2))
    assert len(store.list_for_user(1)) == 1
    assert len(store.list_for_user(2)) == 1
    assert store.user_ids() == [1, 2]


def test_update_preserves_user_fields():
    store = RepositoryStore()
    store.upsert(make_record(id=1))
    store.set_user_status(7, 1, RepoStatus.DEPRECATED)
    store.upsert(make_record(id=1, status=RepoStatus.ACTIVE))
    record = store.get(7, 1)
    assert record.user_status == RepoStatus.DEPRECATED
    assert record.effective_status == RepoStatus.DEPRECATED


def test_persists_to_json(tmp_path):
    path = tmp_path / "data" / "repositories.json"
    store = RepositoryStore(path)
    store.upsert(make_record(id=1, topics=["python"], pushed_at=NOW))
    store.mark_user_synced(7, NOW)

    reloaded = RepositoryStore(path)
    record = reloaded.get(7, 1)
    assert record.topics == ["python"]
    assert record.pushed_at == NOW
    assert reloaded.last_sync_at(7) == NOW


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "repositories.json"
    path.write_text("{not json", encoding="utf-8")
    assert RepositoryStore(path).list_for_user(7) == []


def test_update_topics():
    store = RepositoryStore()
    store.upsert(make_record(id=3))
    store.update_topics(7, 3, ["cli", "python"])
    assert store.get(7, 3).topics == ["cli", "python"]


def test_concurrent_upserts_keep_one_record_per_key():
    store = RepositoryStore()

    def worker(n):
        for i in range(20):
            store.upsert(make_record(id=i % 5, stargazers_count=n))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(r.id for r in store.list_for_user(7)) == [0, 1, 2, 3, 4]


def test_upsert_without_save_defers_the_write(tmp_path):
    path = tmp_path / "repositories.json"
    store = RepositoryStore(path)
    store.upsert(make_record(id=1), save=False)
    assert not path.exists()

    store.save()
    assert RepositoryStore(path).get(7, 1) is not None


def test_load_ignores_unknown_keys_and_skips_broken_entries(tmp_path):
    path = tmp_path / "repositories.json"
    good = make_record(id=1).to_dict()
    good["legacy_field"] = "from an older version"
    path.write_text(json.dumps({"repositories": [good, {"name": "no-id"}, "junk"], "users": {}}), encoding="utf-8")

    store = RepositoryStore(path)
    assert [r.id for r in store.list_for_user(7)] == [1]
