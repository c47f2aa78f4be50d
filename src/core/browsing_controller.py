"""
Browsing controller: turns navigation and file operation requests into
path changes, listing requests and background jobs.

All state changes happen on the thread that owns the controller. Blocking
rclone calls go through the task runner; their results come back as
callbacks on the same thread, in whatever order they finish.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from core.file_opener import open_with_default
from core.jobs import (CopyJob, DeleteJob, Job, JobRegistry, JobStatus, MoveJob,
                       OpenJob, RenameJob, UploadJob, describe_job)
from core.navigation import NavigationHistory
from core.picker_mode import PickerKind, PickerMode, PickerModeState
from core.rclone_client import (FileListing, MkdirResult, PasswordRequiredError,
                                RcloneClient, RcloneError)
from core.rclone_path import RclonePath
from core.task_runner import ThreadedTaskRunner
from utils.crash_logger import CrashLogger
from utils.settings import AppConfig, rclone_config_path

RCLONE_SETUP_HINT = ("Please make sure rclone v1.66 or higher is installed and "
                     "available from your system path.")
MKDIR_UNSUPPORTED_HINT = ("This may be a technical limitation of your storage provider, "
                          "typically with object storage like Amazon S3.\n\n"
                          "To persist the folder, upload a file to it before leaving.")


class ListingStatus(Enum):
    LOADING = 'loading'
    LOADED = 'loaded'
    ERROR = 'error'


@dataclass(frozen=True)
class ListingState:
    status: ListingStatus
    error: str = ''

    @classmethod
    def loading(cls) -> 'ListingState':
        return cls(ListingStatus.LOADING)

    @classmethod
    def loaded(cls) -> 'ListingState':
        return cls(ListingStatus.LOADED)

    @classmethod
    def failed(cls, error: str) -> 'ListingState':
        return cls(ListingStatus.ERROR, error)


def default_cache_dir() -> Path:
    return Path.home() / ".cache" / "rclone-shuttle"


def sort_listings(listings: List[FileListing]) -> List[FileListing]:
    """Directories first, then by name"""
    return sorted(listings, key=lambda listing: (not listing.is_dir, listing.name))


class BrowsingController(QObject):
    path_changed = pyqtSignal(object)  # RclonePath
    listing_state_changed = pyqtSignal(object)  # ListingState
    listing_updated = pyqtSignal(list)  # List[FileListing]
    selection_changed = pyqtSignal(object)  # Optional[FileListing]
    remotes_changed = pyqtSignal(list)  # List[str]
    history_changed = pyqtSignal(bool, bool)  # can undo, can redo
    error_raised = pyqtSignal(str, str, bool)  # title, detail, fatal
    password_required = pyqtSignal()
    rename_requested = pyqtSignal(object)  # FileListing
    delete_requested = pyqtSignal(object)  # FileListing
    overwrite_disclaimer_requested = pyqtSignal()

    def __init__(self, client: Optional[RcloneClient] = None,
                 registry: Optional[JobRegistry] = None,
                 picker: Optional[PickerModeState] = None,
                 runner=None,
                 config: Optional[AppConfig] = None,
                 opener: Callable = open_with_default,
                 cache_dir: Optional[Path] = None,
                 parent=None):
        super().__init__(parent)
        self.client = client
        self.jobs = registry if registry is not None else JobRegistry()
        self.picker = picker if picker is not None else PickerModeState()
        self.runner = runner if runner is not None else ThreadedTaskRunner(self)
        self.config = config if config is not None else AppConfig()
        self.opener = opener
        self.cache_dir = Path(cache_dir) if cache_dir else default_cache_dir()

        self.path: Optional[RclonePath] = None
        self.history = NavigationHistory()
        self.listings: List[FileListing] = []
        self.listing_state = ListingState.loading()
        self.selected_listing: Optional[FileListing] = None
        self.remotes: List[str] = []

        self.picker.subscribe(self._on_picker_mode_changed)

    # ---- Startup ----
    def start(self):
        """Connect to rclone, asking for a password first if the config is encrypted"""
        if self.client is not None:
            self._on_connected(self.client)
            return
        self.runner.submit(lambda: self._connect(None),
                           lambda result: self._on_connect_result(result, False))

    def submit_password(self, password: str):
        self.runner.submit(lambda: self._connect(password),
                           lambda result: self._on_connect_result(result, True))

    @staticmethod
    def _connect(password: Optional[str]):
        """Returns (client, None) or (None, RcloneError)"""
        config_path = rclone_config_path()
        try:
            if password is None and RcloneClient.is_password_required(config_path):
                return None, PasswordRequiredError()
            return RcloneClient.connect(password, config_path), None
        except RcloneError as e:
            return None, e

    def _on_connect_result(self, result, password_given: bool):
        client, error = result
        if isinstance(error, PasswordRequiredError):
            if password_given:
                self.error_raised.emit("Password incorrect", "Please try again.", False)
            self.password_required.emit()
        elif error is not None:
            self.error_raised.emit("Could not initialize rclone", RCLONE_SETUP_HINT, True)
        else:
            self._on_connected(client)

    def _on_connected(self, client: RcloneClient):
        self.client = client
        self.refresh_remotes()
        if not self.config.skip_overwrite_disclaimer:
            self.overwrite_disclaimer_requested.emit()

    def dismiss_overwrite_disclaimer(self, dont_show_again: bool):
        if dont_show_again:
            self.config.set("skip_overwrite_disclaimer", True)

    # ---- Remotes ----
    def refresh_remotes(self):
        client = self.client
        self.runner.submit(lambda: self._guarded(client.list_remotes), self._on_remotes_listed)

    def _on_remotes_listed(self, result):
        success, payload = result
        if not success:
            self.error_raised.emit("Could not list remotes", str(payload), False)
            return
        self.remotes = list(payload)
        self.remotes_changed.emit(self.remotes)
        if self.remotes:
            self._change_path(RclonePath(self.remotes[0]))

    def select_remote(self, name: str):
        self.navigate_to(RclonePath(name))

    # ---- Navigation ----
    def _push_history(self):
        if self.path is not None:
            self.history.push_current_and_clear_forward(self.path)

    def navigate_to(self, path: RclonePath):
        """Direct navigation: recorded in history unless it targets the current location"""
        if path != self.path:
            self._push_history()
        self._change_path(path)

    def enter_path(self, text: str):
        text = text.strip()
        if text:
            self.navigate_to(RclonePath(text))

    def go_parent(self):
        if self.path is None:
            return
        self.navigate_to(self.path.resolve_to_parent())

    def undo(self):
        if self.path is None:
            return
        previous = self.history.undo(self.path)
        if previous is not None:
            self._change_path(previous)

    def redo(self):
        if self.path is None:
            return
        following = self.history.redo(self.path)
        if following is not None:
            self._change_path(following)

    def refresh(self):
        if self.path is not None:
            self._change_path(self.path)

    def _change_path(self, path: RclonePath):
        self.path = path
        self.listings = []
        self._set_selection(None)
        self._set_listing_state(ListingState.loading())
        self.path_changed.emit(path)
        self.listing_updated.emit([])
        self.history_changed.emit(self.history.can_undo(), self.history.can_redo())

        client = self.client
        if client is None:
            return
        self.runner.submit(lambda: self._guarded(client.ls, path),
                           lambda result: self._on_listing_result(path, result))

    def _on_listing_result(self, path: RclonePath, result):
        if path != self.path:
            return  # user navigated elsewhere meanwhile
        success, payload = result
        if not success:
            self._set_listing_state(ListingState.failed(str(payload)))
            return
        self.listings = sort_listings(payload)
        self.listing_updated.emit(self.listings)
        first = self.listings[0] if self.listings else None
        self._set_selection(first if first is not None and self.is_selectable(first) else None)
        self._set_listing_state(ListingState.loaded())

    def _set_listing_state(self, state: ListingState):
        self.listing_state = state
        self.listing_state_changed.emit(state)

    def show_listing_error_detail(self):
        if self.listing_state.status is ListingStatus.ERROR:
            self.error_raised.emit("Something went wrong", self.listing_state.error, False)

    # ---- Selection ----
    def is_selectable(self, listing: FileListing) -> bool:
        """In destination picking only folders can be chosen"""
        return self.picker.mode.is_browse or listing.is_dir

    def select_entry(self, listing: Optional[FileListing]):
        if listing is not None and not self.is_selectable(listing):
            listing = None
        self._set_selection(listing)

    def _set_selection(self, listing: Optional[FileListing]):
        if listing == self.selected_listing:
            return
        self.selected_listing = listing
        self.selection_changed.emit(listing)

    def activate_entry(self, listing: FileListing):
        """Double click / Enter on a row"""
        if listing.is_dir:
            self.navigate_to(listing.path)
        elif self.picker.mode.is_browse:
            self.open_file(listing.path)

    def _on_picker_mode_changed(self, _mode: PickerMode):
        self._set_selection(None)

    # ---- Picker mode ----
    def move_key_pressed(self):
        kind = self.picker.mode.kind
        if kind is PickerKind.BROWSE:
            self.request_move_selection()
        elif kind is PickerKind.SELECT_MOVE_DESTINATION:
            self.confirm_move()

    def copy_key_pressed(self):
        kind = self.picker.mode.kind
        if kind is PickerKind.BROWSE:
            self.request_copy_selection()
        elif kind is PickerKind.SELECT_COPY_DESTINATION:
            self.confirm_copy()

    def request_move_selection(self):
        if self.selected_listing is not None:
            self.picker.request_move(self.selected_listing.path)

    def request_copy_selection(self):
        if self.selected_listing is not None:
            self.picker.request_copy(self.selected_listing.path)

    def cancel_destination(self):
        self.picker.cancel()

    def confirm_move(self) -> Optional[Job]:
        if self.path is None:
            return None
        source = self.picker.take_destination_request(PickerKind.SELECT_MOVE_DESTINATION)
        if source is None:
            return None
        target = self.path.join(source.filename())
        client = self.client
        return self._dispatch_job(Job(MoveJob(source, target)),
                                  lambda: client.move(source, target))

    def confirm_copy(self) -> Optional[Job]:
        if self.path is None:
            return None
        source = self.picker.take_destination_request(PickerKind.SELECT_COPY_DESTINATION)
        if source is None:
            return None
        target = self.path.join(source.filename())
        client = self.client
        return self._dispatch_job(Job(CopyJob(source, target)),
                                  lambda: client.copy(source, target))

    # ---- File operations ----
    def open_file(self, remote_path: RclonePath) -> Job:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        tmp_filename = f"tmp{int(time.time() * 1000)}-{remote_path.filename()}"
        tmp_local_path = RclonePath(str(self.cache_dir)).join(tmp_filename)
        client = self.client
        return self._dispatch_job(Job(OpenJob(remote_path, tmp_local_path)),
                                  lambda: client.copy(remote_path, tmp_local_path))

    def upload(self, local_path: RclonePath, remote_path: RclonePath) -> Job:
        client = self.client
        return self._dispatch_job(Job(UploadJob(local_path, remote_path)),
                                  lambda: client.copy(local_path, remote_path))

    def files_dropped(self, local_paths) -> List[Job]:
        if self.path is None:
            return []
        created = []
        for raw in local_paths:
            local_path = RclonePath(str(raw))
            created.append(self.upload(local_path, self.path.join(local_path.filename())))
        return created

    def rename_key_pressed(self):
        if self.picker.mode.is_browse and self.selected_listing is not None:
            self.rename_requested.emit(self.selected_listing)

    def delete_key_pressed(self):
        if self.picker.mode.is_browse and self.selected_listing is not None:
            self.delete_requested.emit(self.selected_listing)

    def rename(self, path: RclonePath, new_name: str) -> Optional[Job]:
        new_name = new_name.strip()
        if not new_name or new_name == path.filename():
            return None
        client = self.client
        new_path = path.resolve_to_parent().join(new_name)
        return self._dispatch_job(Job(RenameJob(new_path)),
                                  lambda: client.rename(path, new_name))

    def delete(self, path: RclonePath, is_dir: bool) -> Job:
        client = self.client
        return self._dispatch_job(Job(DeleteJob(path)),
                                  lambda: client.remove(path, is_dir))

    def create_folder(self, name: str):
        name = name.strip()
        if not name or self.path is None or self.client is None:
            return
        path = self.path.join(name)
        client = self.client
        self.runner.submit(lambda: self._guarded_mkdir(client, path),
                           lambda result: self._on_mkdir_result(path, result))

    @staticmethod
    def _guarded_mkdir(client: RcloneClient, path: RclonePath):
        try:
            return client.mkdir(path)
        except Exception as e:
            return MkdirResult.FAILED, str(e)

    def _on_mkdir_result(self, path: RclonePath, result):
        outcome, message = result
        if outcome is MkdirResult.CREATED:
            self.refresh()
        elif outcome is MkdirResult.NOT_SUPPORTED_HERE:
            self.error_raised.emit("Cannot create empty folder", MKDIR_UNSUPPORTED_HINT, False)
            self.navigate_to(path)
        else:
            self.error_raised.emit("Something went wrong", message, False)

    # ---- Jobs ----
    @staticmethod
    def _guarded(work, *args):
        """Run a client call, turning unexpected exceptions into a failure tuple"""
        try:
            return work(*args)
        except Exception as e:
            return False, str(e)

    def _dispatch_job(self, job: Job, work) -> Job:
        # Registered before the transfer starts so the queue shows it immediately
        self.jobs.insert(job)

        def execute():
            success, message = self._guarded(work)
            return JobStatus.finished() if success else JobStatus.failed(message)

        self.runner.submit(execute, lambda status: self._on_job_finished(job.id, status))
        return job

    def _on_job_finished(self, job_id: uuid.UUID, status: JobStatus):
        job = self.jobs.set_status(job_id, status)
        if job is None:
            return
        if status.is_failed:
            CrashLogger.log_job_failure(describe_job(job), status.message)
        if isinstance(job.job_type, OpenJob):
            if not status.is_failed:
                success, error = self.opener(str(job.job_type.tmp_local_path))
                if not success:
                    self.error_raised.emit("Could not open file", error, False)
        else:
            self.refresh()

    def remove_job(self, job_id: uuid.UUID) -> bool:
        """Remove a terminated job from the queue; ongoing jobs stay"""
        job = self.jobs.get(job_id)
        if job is None or not job.status.is_terminal:
            return False
        self.jobs.remove(job_id)
        return True

    def clear_finished_jobs(self):
        # Completions are applied on this same thread, so none can land between the two calls
        remaining = [j for j in self.jobs.snapshot() if not j.status.is_terminal]
        self.jobs.replace_all(remaining)
