from __future__ import annotations

import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from intelcrawl.exceptions import CrawlAlreadyRunningError


@dataclass
class CrawlRun:
    id: str
    status: str
    started_at: datetime
    seeds: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    config_name: Optional[str] = None
    finished_at: Optional[datetime] = None
    summary: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class InMemoryCrawlRegistry:
    """Thread-safe single-flight registry of the running crawl and recent ones.

    Only one crawl may be running at a time; `start` raises
    CrawlAlreadyRunningError otherwise. Completed runs are kept up to
    `max_completed_records`, oldest evicted first.
    """

    def __init__(self, *, max_completed_records: int = 100):
        if max_completed_records < 0:
            raise ValueError("max_completed_records must be >= 0")
        self._lock = threading.Lock()
        self._runs: Dict[str, CrawlRun] = {}
        self._active_id: Optional[str] = None
        self._completed: Deque[str] = deque()
        self._max_completed_records = max_completed_records

    def start(self, run_id: str, *, seeds=(), keywords=(), config_name: Optional[str] = None) -> CrawlRun:
        with self._lock:
            if self._active_id is not None:
                raise CrawlAlreadyRunningError(self._active_id)
            run = CrawlRun(
                id=run_id,
                status="running",
                started_at=datetime.now(timezone.utc),
                seeds=list(seeds),
                keywords=list(keywords),
                config_name=config_name,
            )
            self._runs[run_id] = run
            self._active_id = run_id
            return run

    def finish(self, run_id: str, *, status: str = "finished", summary: Optional[Dict[str, Any]] = None, error: Optional[str] = None) -> bool:
        with self._lock:
            run = self._runs.get(run_id)
            if run is None or run.finished_at is not None:
                return False
            run.status = status
            run.summary = summary
            run.error = error
            run.finished_at = datetime.now(timezone.utc)
            if self._active_id == run_id:
                self._active_id = None
            self._completed.append(run_id)
            while len(self._completed) > self._max_completed_records:
                self._runs.pop(self._completed.popleft(), None)
            return True

    def active(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            run = self._runs.get(self._active_id) if self._active_id else None
            return asdict(run) if run else None

    def get(self, run_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            run = self._runs.get(run_id)
            return asdict(run) if run else None

    def list_recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        with self._lock:
            runs = sorted(self._runs.values(), key=lambda r: r.started_at, reverse=True)
            return [asdict(r) for r in runs[:limit]]
