"""
Widget tests for the path navigator, the job queue and the name prompt
"""
import pytest

from core.browsing_controller import BrowsingController
from core.jobs import JobStatus
from core.rclone_path import RclonePath
from core.task_runner import ImmediateTaskRunner
from ui.path_navigator import PathNavigator, path_segments
from ui.queue_panel import QueueButton, QueueDialog
from ui.rename_dialog import StringPromptDialog, _selection_span


class TestPathNavigator:
    def test_remote_segments(self):
        segments = path_segments(RclonePath("gdrive:photos/2024"))
        assert segments == [
            ("gdrive:", RclonePath("gdrive:")),
            ("photos", RclonePath("gdrive:photos")),
            ("2024", RclonePath("gdrive:photos/2024")),
        ]

    def test_posix_segments(self):
        labels = [label for label, _ in path_segments(RclonePath("/home/me"))]
        assert labels == ["/", "home", "me"]

    def test_segment_click_emits_path(self):
        navigator = PathNavigator()
        entered = []
        navigator.path_entered.connect(entered.append)
        navigator.set_path(RclonePath("r:a/b"))
        assert navigator.segment_labels() == ["r:", "a", "b"]
        navigator.button_layout.itemAt(1).widget().click()
        assert entered == ["r:a"]

    def test_edit_mode_submits_text(self):
        navigator = PathNavigator()
        entered = []
        navigator.path_entered.connect(entered.append)
        navigator.set_path(RclonePath("r:a"))
        navigator.enter_edit_mode()
        assert navigator.path_edit.text() == "r:a"
        navigator.path_edit.setText("  other:dir ")
        navigator.confirm_path_edit()
        assert entered == ["other:dir"]
        assert not navigator.edit_mode


class _Client:
    def list_remotes(self):
        return True, ["r:"]

    def ls(self, path):
        return True, []

    def remove(self, path, is_dir=False):
        return False, "denied"


@pytest.fixture
def controller(config):
    c = BrowsingController(client=_Client(), runner=ImmediateTaskRunner(), config=config)
    c.start()
    return c


class TestQueue:
    def test_button_summary_follows_registry(self, controller):
        button = QueueButton(controller)
        assert button.text() == "Ready"
        controller.delete(RclonePath("r:x"), False)
        assert button.text() == "Error"

    def test_dialog_rows_and_clear(self, controller):
        dialog = QueueDialog(controller)
        assert dialog.row_count() == 0
        assert not dialog.empty_label.isHidden()

        controller.delete(RclonePath("r:x"), False)
        controller.delete(RclonePath("r:y"), False)
        assert dialog.row_count() == 2
        assert dialog.empty_label.isHidden()

        first_row = dialog.rows_layout.itemAt(0).widget()
        assert first_row.state_label.text() == "Failed"
        assert first_row.state_label.toolTip() == "denied"
        assert first_row.btn_remove.isEnabled()

        dialog.btn_clear.click()
        assert dialog.row_count() == 0

    def test_remove_button(self, controller):
        dialog = QueueDialog(controller)
        job = controller.delete(RclonePath("r:x"), False)
        assert controller.jobs.get(job.id).status == JobStatus.failed("denied")
        dialog.rows_layout.itemAt(0).widget().btn_remove.click()
        assert len(controller.jobs) == 0
        assert dialog.row_count() == 0


class TestRenamePrompt:
    @pytest.mark.parametrize("name,span", [
        ("hello.txt", (0, 5)),
        ("hello.tar.gz", (0, 5)),
        ("Makefile", (0, 8)),
        (".bashrc", (0, 7)),
        ("", (0, 0)),
    ])
    def test_selection_span(self, name, span):
        assert _selection_span(name) == span

    def test_base_name_preselected(self):
        dialog = StringPromptDialog("Rename", "Enter a new name", "report.pdf")
        assert dialog.line_edit.selectedText() == "report"

    def test_value_is_trimmed(self):
        dialog = StringPromptDialog("New folder", "Name", "")
        dialog.line_edit.setText("  photos ")
        assert dialog.value == "photos"
