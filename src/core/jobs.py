"""Background job records and the shared job registry."""
from __future__ import annotations

import copy
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal

from core.rclone_path import RclonePath


@dataclass(frozen=True)
class UploadJob:
    local_path: RclonePath
    remote_path: RclonePath


@dataclass(frozen=True)
class MoveJob:
    source_path: RclonePath
    target_path: RclonePath


@dataclass(frozen=True)
class CopyJob:
    source_path: RclonePath
    target_path: RclonePath


@dataclass(frozen=True)
class RenameJob:
    path: RclonePath  # the new path, after renaming


@dataclass(frozen=True)
class DeleteJob:
    path: RclonePath


@dataclass(frozen=True)
class OpenJob:
    remote_path: RclonePath
    tmp_local_path: RclonePath


JobType = Union[UploadJob, MoveJob, CopyJob, RenameJob, DeleteJob, OpenJob]


class JobState(Enum):
    ONGOING = 'ongoing'
    FINISHED = 'finished'
    FAILED = 'failed'


@dataclass(frozen=True)
class JobStatus:
    state: JobState
    message: str = ''

    @classmethod
    def ongoing(cls) -> 'JobStatus':
        return cls(JobState.ONGOING)

    @classmethod
    def finished(cls) -> 'JobStatus':
        return cls(JobState.FINISHED)

    @classmethod
    def failed(cls, message: str) -> 'JobStatus':
        return cls(JobState.FAILED, message)

    @property
    def is_terminal(self) -> bool:
        return self.state is not JobState.ONGOING

    @property
    def is_failed(self) -> bool:
        return self.state is JobState.FAILED


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Job:
    """One user-requested file operation.

    A job starts out ongoing and moves to finished or failed exactly once.
    """

    job_type: JobType
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    status: JobStatus = field(default_factory=JobStatus.ongoing)
    started_at: datetime = field(default_factory=_now)

    def set_status(self, new_status: JobStatus) -> None:
        """Overwrite the status.

        Precondition: the job is still ongoing. Terminal states are final.
        """
        assert not self.status.is_terminal, f"Job {self.id} already {self.status.state.value}"
        self.status = new_status


class JobRegistry(QObject):
    """Thread-safe collection of jobs keyed by id, in insertion order.

    Every committed mutation emits jobs_changed once, after the internal
    lock has been released, so subscribers always read post-mutation state.
    Reads hand out copies; the stored jobs only change through set_status().
    """

    jobs_changed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._lock = threading.Lock()
        self._jobs: Dict[uuid.UUID, Job] = {}

    def subscribe(self, callback: Callable[[], None]) -> None:
        self.jobs_changed.connect(callback)

    def insert(self, job: Job) -> None:
        with self._lock:
            self._jobs[job.id] = copy.copy(job)
        self.jobs_changed.emit()

    def remove(self, job_id: uuid.UUID) -> Optional[Job]:
        with self._lock:
            removed = self._jobs.pop(job_id, None)
        if removed is not None:
            self.jobs_changed.emit()
        return removed

    def get(self, job_id: uuid.UUID) -> Optional[Job]:
        with self._lock:
            job = self._jobs.get(job_id)
            return copy.copy(job) if job is not None else None

    def set_status(self, job_id: uuid.UUID, status: JobStatus) -> Optional[Job]:
        """Apply a status transition; returns the updated job or None if unknown."""
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            job.set_status(status)
            updated = copy.copy(job)
        self.jobs_changed.emit()
        return updated

    def snapshot(self) -> List[Job]:
        with self._lock:
            return [copy.copy(j) for j in self._jobs.values()]

    def replace_all(self, jobs: Iterable[Job]) -> None:
        with self._lock:
            self._jobs = {j.id: copy.copy(j) for j in jobs}
        self.jobs_changed.emit()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    # Derived views, each computed over a single snapshot
    def ongoing_jobs(self) -> List[Job]:
        return [j for j in self.snapshot() if not j.status.is_terminal]

    def has_failed_jobs(self) -> bool:
        return any(j.status.is_failed for j in self.snapshot())

    def newest_first(self) -> List[Job]:
        return sorted(self.snapshot(), key=lambda j: j.started_at, reverse=True)


def queue_summary(jobs: List[Job]) -> str:
    """Short status for the queue button: Working, Error or Ready."""
    if any(not j.status.is_terminal for j in jobs):
        return "Working"
    if any(j.status.is_failed for j in jobs):
        return "Error"
    return "Ready"


def describe_job(job: Job) -> str:
    """Human readable one-line summary of a job."""
    job_type = job.job_type
    if isinstance(job_type, UploadJob):
        return f"Upload {job_type.local_path.filename()} to {job_type.remote_path.resolve_to_parent()}"
    if isinstance(job_type, MoveJob):
        return f"Move {job_type.source_path.filename()} to {job_type.target_path.resolve_to_parent()}"
    if isinstance(job_type, CopyJob):
        return f"Copy {job_type.source_path.filename()} to {job_type.target_path.resolve_to_parent()}"
    if isinstance(job_type, RenameJob):
        return f"Rename {job_type.path.filename()} in {job_type.path.resolve_to_parent()}"
    if isinstance(job_type, DeleteJob):
        return f"Delete {job_type.path.filename()} from {job_type.path.resolve_to_parent()}"
    if isinstance(job_type, OpenJob):
        return f"Open {job_type.remote_path.filename()} from {job_type.remote_path.resolve_to_parent()}"
    raise TypeError(f"Unknown job type: {job_type!r}")
