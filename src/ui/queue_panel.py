"""Job queue: status button and the dialog listing every job."""
from PyQt6.QtWidgets import (QWidget, QVBoxLayout, QFrame, QHBoxLayout, QLabel,
                             QPushButton, QDialog, QScrollArea, QSizePolicy)

from core.jobs import JobRegistry, JobState, describe_job, queue_summary

STATE_LABELS = {
    JobState.ONGOING: "Ongoing",
    JobState.FINISHED: "Finished",
    JobState.FAILED: "Failed",
}


class JobRow(QFrame):
    def __init__(self, job, on_remove, parent=None):
        super().__init__(parent)
        self.job = job
        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Sunken)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)

        self.state_label = QLabel(STATE_LABELS[job.status.state])
        self.state_label.setFixedWidth(70)
        if job.status.is_failed:
            self.state_label.setToolTip(job.status.message)
        self.description = QLabel(describe_job(job))
        self.description.setWordWrap(True)
        self.btn_remove = QPushButton("x")
        self.btn_remove.setFixedWidth(28)
        self.btn_remove.setToolTip("Remove from queue")
        self.btn_remove.setEnabled(job.status.is_terminal)
        self.btn_remove.clicked.connect(lambda: on_remove(job.id))

        layout.addWidget(self.state_label, 0)
        layout.addWidget(self.description, 5)
        layout.addWidget(self.btn_remove, 0)


class QueueDialog(QDialog):
    """Lists all jobs, newest first; rebuilt on every registry change"""

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.registry: JobRegistry = controller.jobs
        self.setWindowTitle("Queue")
        self.resize(520, 360)

        layout = QVBoxLayout(self)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self.rows_container = QWidget()
        self.rows_layout = QVBoxLayout(self.rows_container)
        self.rows_layout.setContentsMargins(4, 4, 4, 4)
        self.rows_layout.setSpacing(4)
        self.rows_layout.addStretch()
        scroll.setWidget(self.rows_container)
        layout.addWidget(scroll)

        self.empty_label = QLabel("Queue is empty")
        layout.addWidget(self.empty_label)

        self.btn_clear = QPushButton("Clear finished")
        self.btn_clear.clicked.connect(self.controller.clear_finished_jobs)
        layout.addWidget(self.btn_clear)

        self.registry.subscribe(self.rebuild)
        self.rebuild()

    def rebuild(self):
        while self.rows_layout.count() > 1:
            item = self.rows_layout.takeAt(0)
            widget = item.widget()
            if widget:
                widget.setParent(None)
                widget.deleteLater()
        jobs = self.registry.newest_first()
        for index, job in enumerate(jobs):
            self.rows_layout.insertWidget(index, JobRow(job, self.controller.remove_job, self.rows_container))
        self.empty_label.setVisible(not jobs)

    def row_count(self):
        return self.rows_layout.count() - 1


class QueueButton(QPushButton):
    """Bottom bar button showing Working / Error / Ready"""

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setToolTip("View job queue")
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.dialog = None
        self.clicked.connect(self.show_dialog)
        controller.jobs.subscribe(self.update_summary)
        self.update_summary()

    def update_summary(self):
        self.setText(queue_summary(self.controller.jobs.snapshot()))

    def show_dialog(self):
        if self.dialog is None:
            self.dialog = QueueDialog(self.controller, self.window())
        self.dialog.show()
        self.dialog.raise_()
