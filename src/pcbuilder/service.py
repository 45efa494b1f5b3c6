from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict

from .builder import normalize_budget
from .data import Catalog, default_catalog
from .engine import ConfigurationEngine
from .schemas import ConfigurationSnapshot, ExtraKey, MemorySize, UseCaseId

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    pass


@dataclass
class SessionState:
    engine: ConfigurationEngine
    actions: int = 0


class ConfiguratorService:
    def __init__(
        self,
        catalog: Catalog | None = None,
        session_ttl_seconds: int | None = 24 * 3600,
        session_cleanup_interval_seconds: int = 600,
    ):
        self.catalog = catalog or default_catalog()
        self.sessions: Dict[str, SessionState] = {}
        self._sessions_lock = threading.Lock()
        self._session_locks: Dict[str, threading.Lock] = {}
        self._session_last_seen: Dict[str, float] = {}
        self._cleanup_lock = threading.Lock()
        self._last_memory_cleanup_monotonic = 0.0
        self.session_ttl_seconds = max(0, int(session_ttl_seconds or 0))
        self.session_cleanup_interval_seconds = max(1, int(session_cleanup_interval_seconds))
        self._expired_sessions = 0
        self._ended_sessions = 0

    def create_session(self) -> str:
        session_id = uuid.uuid4().hex
        with self._sessions_lock:
            self.sessions[session_id] = SessionState(engine=ConfigurationEngine(self.catalog))
            self._session_locks[session_id] = threading.Lock()
            self._session_last_seen[session_id] = time.monotonic()
        logger.info("session %s started", session_id)
        self._cleanup_in_memory_cache()
        return session_id

    def end_session(self, session_id: str) -> None:
        with self._sessions_lock:
            if self.sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
            self._session_locks.pop(session_id, None)
            self._session_last_seen.pop(session_id, None)
            self._ended_sessions += 1
        logger.info("session %s ended", session_id)

    def snapshot(self, session_id: str) -> ConfigurationSnapshot:
        return self._run(session_id, None)

    def set_budget(self, session_id: str, value: int) -> ConfigurationSnapshot:
        # 与滑块一致：先夹到范围并吸附步长
        budget = normalize_budget(value)
        return self._run(session_id, lambda engine: engine.set_budget(budget))

    def select_category(self, session_id: str, category_id: str) -> ConfigurationSnapshot:
        return self._run(session_id, lambda engine: engine.select_category_midpoint(category_id))

    def set_use_case(self, session_id: str, use_case: UseCaseId) -> ConfigurationSnapshot:
        return self._run(session_id, lambda engine: engine.set_use_case(use_case))

    def toggle_extra(self, session_id: str, key: ExtraKey) -> ConfigurationSnapshot:
        return self._run(session_id, lambda engine: engine.toggle_extra(key))

    def set_memory_size(self, session_id: str, size: MemorySize) -> ConfigurationSnapshot:
        return self._run(session_id, lambda engine: engine.set_memory_size(size))

    def _run(
        self,
        session_id: str,
        action: Callable[[ConfigurationEngine], None] | None,
    ) -> ConfigurationSnapshot:
        session, lock = self._get_session(session_id)
        with lock:
            if action is not None:
                action(session.engine)
                session.actions += 1
            result = session.engine.snapshot()
        self._cleanup_in_memory_cache()
        return result

    def _get_session(self, session_id: str) -> tuple[SessionState, threading.Lock]:
        with self._sessions_lock:
            session = self.sessions.get(session_id)
            lock = self._session_locks.get(session_id)
            if session is None or lock is None:
                raise SessionNotFoundError(session_id)
            self._session_last_seen[session_id] = time.monotonic()
            return session, lock

    def _cleanup_in_memory_cache(self, force: bool = False) -> None:
        if self.session_ttl_seconds <= 0:
            return
        now = time.monotonic()
        if not force and (now - self._last_memory_cleanup_monotonic) < self.session_cleanup_interval_seconds:
            return
        with self._cleanup_lock:
            now = time.monotonic()
            if not force and (now - self._last_memory_cleanup_monotonic) < self.session_cleanup_interval_seconds:
                return
            expire_before = now - float(self.session_ttl_seconds)
            with self._sessions_lock:
                stale_sessions = [sid for sid, seen in self._session_last_seen.items() if seen < expire_before]
                for sid in stale_sessions:
                    lock = self._session_locks.get(sid)
                    if lock is not None and lock.locked():
                        continue
                    self.sessions.pop(sid, None)
                    self._session_last_seen.pop(sid, None)
                    self._session_locks.pop(sid, None)
                    self._expired_sessions += 1
                    logger.info("session %s expired", sid)
            self._last_memory_cleanup_monotonic = now

    def metrics(self) -> dict:
        with self._sessions_lock:
            sessions = list(self.sessions.values())
            expired = self._expired_sessions
            ended = self._ended_sessions

        total_actions = sum(s.actions for s in sessions)
        by_use_case = Counter(s.engine.use_case for s in sessions)
        by_category = Counter(s.engine.active_category().id for s in sessions)
        return {
            "active_sessions": len(sessions),
            "ended_sessions": ended,
            "expired_sessions": expired,
            "total_actions": total_actions,
            "avg_actions_per_session": round(total_actions / len(sessions), 2) if sessions else 0.0,
            "by_use_case": {u.id: by_use_case.get(u.id, 0) for u in self.catalog.use_cases},
            "by_category": {c.id: by_category.get(c.id, 0) for c in self.catalog.categories},
        }
