"""
Hand a local file to the desktop's default application
"""
import os
import subprocess
import sys
from pathlib import Path


def open_with_default(path):
    """Open a file with the default application without waiting for it.

    Returns (success, error_message).
    """
    try:
        path_obj = Path(str(path))
        if not path_obj.exists():
            return False, f"File not found: {path_obj}"
        if sys.platform.startswith('win'):
            os.startfile(str(path_obj))  # type: ignore[attr-defined]
        elif sys.platform == 'darwin':
            subprocess.Popen(['open', str(path_obj)])
        else:
            subprocess.Popen(['xdg-open', str(path_obj)], cwd=str(path_obj.parent))
        return True, ""
    except OSError as e:
        return False, str(e)
