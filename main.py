#!/usr/bin/env python3
"""
Rclone Shuttle - Main Entry Point
"""
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import QTimer
from ui.main_window import MainWindow
from utils.crash_logger import CrashLogger


def main():
    # Unhandled exceptions from the GUI and worker threads end up in the crash log
    CrashLogger.install_exception_handler()

    app = QApplication(sys.argv)
    app.setApplicationName("Rclone Shuttle")
    app.setApplicationVersion("1.0")
    app.setDesktopFileName("io.github.pieterdd.RcloneShuttle")

    window = MainWindow()
    window.show()
    # Connect once the event loop runs so dialogs have a parent window
    QTimer.singleShot(0, window.controller.start)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
