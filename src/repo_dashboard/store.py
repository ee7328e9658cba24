# src/repo_dashboard/store.py
"""
Local store for synced repositories.

Records are keyed by (user_id, remote repository id). When a path is given
the whole store is kept in a single JSON file, rewritten after each change.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from .models import RepositoryRecord, parse_timestamp

logger = logging.getLogger(__name__)

# Fields owned by the user; a sync never overwrites them
USER_FIELDS = ("user_status", "planned_action")


class RepositoryStore:
    def __init__(self, path=None):
        self.path = Path(path) if path else None
        self._records = {}
        self._user_sync = {}
        self._lock = threading.RLock()
        self._key_locks = {}
        self._user_locks = {}
        if self.path and self.path.exists():
            self._load()

    def _load(self):
        try:
            content = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read store %s, starting empty: %s", self.path, e)
            return
        for index, data in enumerate(content.get("repositories", [])):
            try:
                record = RepositoryRecord.from_dict(data)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable repository entry %d in %s: %s", index, self.path, e)
                continue
            self._records[(record.user_id, record.id)] = record
        for user_id, synced_at in content.get("users", {}).items():
            self._user_sync[int(user_id)] = parse_timestamp(synced_at)
        logger.info("Loaded %d repositories from %s", len(self._records), self.path)

    def _save(self):
        if not self.path:
            return
        content = {
            "repositories": [record.to_dict() for record in self._records.values()],
            "users": {
                str(user_id): synced_at.isoformat() if synced_at else None
                for user_id, synced_at in self._user_sync.items()
            },
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(content, f, indent=2)
        os.replace(tmp_path, self.path)

    def save(self):
        with self._lock:
            self._save()

    def key_lock(self, user_id, remote_id):
        with self._lock:
            return self._key_locks.setdefault((user_id, remote_id), threading.Lock())

    def user_lock(self, user_id):
        """Held for the duration of a sync so re-triggered syncs run one after another."""
        with self._lock:
            return self._user_locks.setdefault(user_id, threading.Lock())

    def get(self, user_id, remote_id):
        with self._lock:
            return self._records.get((user_id, remote_id))

    def list_for_user(self, user_id):
        with self._lock:
            return [record for (owner_id, _), record in self._records.items() if owner_id == user_id]

    def upsert(self, record, save=True):
        """
        Insert or replace a record. Returns "created" or "updated".

        With save=False the file is left untouched until the next call to save().
        """
        with self.key_lock(record.user_id, record.id):
            with self._lock:
                key = (record.user_id, record.id)
                existing = self._records.get(key)
                if existing is not None:
                    for name in USER_FIELDS:
                        setattr(record, name, getattr(existing, name))
                self._records[key] = record
                if save:
                    self._save()
            return "updated" if existing is not None else "created"

    def update_topics(self, user_id, remote_id, topics):
        with self._lock:
            record = self._records[(user_id, remote_id)]
            record.topics = list(topics)
            self._save()
            return record

    def set_user_status(self, user_id, remote_id, status):
        with self._lock:
            record = self._records[(user_id, remote_id)]
            record.user_status = status
            self._save()
            return record

    def mark_user_synced(self, user_id, synced_at):
        with self._lock:
            self._user_sync[user_id] = synced_at
            self._save()

    def user_ids(self):
        with self._lock:
            return sorted({user_id for user_id, _ in self._records} | set(self._user_sync))

    def last_sync_at(self, user_id):
        with self._lock:
            return self._user_sync.get(user_id)
