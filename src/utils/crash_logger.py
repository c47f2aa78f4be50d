"""
Crash and job failure log for Rclone Shuttle.

Unhandled exceptions (main thread and worker threads) and failed jobs are
appended with a timestamp to a single log file that rotates at 5 MB.
"""
import sys
import threading
import traceback
from datetime import datetime
from pathlib import Path


class CrashLogger:
    LOG_DIR = Path.home() / ".local" / "share" / "rclone-shuttle"
    LOG_FILE = LOG_DIR / "crash.log"
    MAX_LOG_SIZE = 5 * 1024 * 1024
    SEPARATOR = "=" * 80

    @classmethod
    def setup(cls):
        """Create the log directory, falling back to the working directory"""
        try:
            cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
        except OSError:
            cls.LOG_DIR = Path.cwd()
            cls.LOG_FILE = cls.LOG_DIR / "crash.log"

    @classmethod
    def _append(cls, heading, body):
        cls.setup()
        cls._rotate_log_if_needed()
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        entry = f"\n{cls.SEPARATOR}\n{heading} - {timestamp}\n{cls.SEPARATOR}\n{body}{cls.SEPARATOR}\n"
        with open(cls.LOG_FILE, 'a', encoding='utf-8') as f:
            f.write(entry)
        return entry

    @classmethod
    def log_exception(cls, exc_type, exc_value, exc_traceback):
        """sys.excepthook compatible handler for fatal errors"""
        body = f"Exception Type: {exc_type.__name__}\n"
        body += f"Exception Message: {exc_value}\n"
        body += "\nStack Trace:\n"
        body += "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
        try:
            entry = cls._append("FATAL ERROR", body)
            print(f"\nFATAL ERROR logged to: {cls.LOG_FILE}", file=sys.stderr)
            print(entry, file=sys.stderr)
        except OSError as e:
            print(f"Failed to write crash log: {e}", file=sys.stderr)
            traceback.print_exception(exc_type, exc_value, exc_traceback)

    @classmethod
    def log_thread_exception(cls, args):
        """threading.excepthook compatible handler for worker threads"""
        if args.exc_type is SystemExit:
            return
        cls.log_exception(args.exc_type, args.exc_value, args.exc_traceback)

    @classmethod
    def log_job_failure(cls, description, message):
        """Record a failed job; never raises"""
        try:
            cls._append("JOB FAILED", f"Job: {description}\n\n{message}\n")
        except OSError as e:
            print(f"Failed to write crash log: {e}", file=sys.stderr)

    @classmethod
    def _rotate_log_if_needed(cls):
        try:
            if cls.LOG_FILE.exists() and cls.LOG_FILE.stat().st_size > cls.MAX_LOG_SIZE:
                backup_file = cls.LOG_FILE.with_suffix('.log.old')
                if backup_file.exists():
                    backup_file.unlink()
                cls.LOG_FILE.rename(backup_file)
        except OSError:
            pass  # keep appending to the oversized file

    @classmethod
    def install_exception_handler(cls):
        sys.excepthook = cls.log_exception
        threading.excepthook = cls.log_thread_exception

