"""
Main window for Rclone Shuttle
"""
from PyQt6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QToolBar,
                             QPushButton, QMessageBox, QSplitter, QListWidget, QLabel,
                             QInputDialog, QLineEdit, QStackedWidget)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QKeySequence, QShortcut

from core.browsing_controller import BrowsingController, ListingStatus
from core.picker_mode import PickerKind
from ui.file_list_view import FileListView
from ui.path_navigator import PathNavigator
from ui.queue_panel import QueueButton
from ui.rename_dialog import get_folder_name, get_rename

CONFIGURE_REMOTES_HINT = ("The Rclone CLI can be used to configure a wide variety of cloud storage "
                          "providers and protocols. Open up your favorite terminal and enter "
                          "'rclone config' to add, edit or delete remotes.")
OVERWRITE_DISCLAIMER = ("Rclone does not warn before overwriting files. If you upload, move or copy "
                        "a file over another, Rclone will replace it without confirmation.")


class MainWindow(QMainWindow):
    def __init__(self, controller=None):
        super().__init__()
        self.controller = controller or BrowsingController(parent=self)
        self._syncing_remotes = False

        self.setup_ui()
        self.setup_shortcuts()
        self.setup_connections()
        self.restore_settings()

    def setup_ui(self):
        self.setWindowTitle("Rclone Shuttle")
        self.setMinimumSize(800, 500)

        self.create_toolbar()

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.remote_list = QListWidget()
        self.splitter.addWidget(self.remote_list)

        # Listing, or a loading / error placeholder in its place
        self.listing_stack = QStackedWidget()
        self.file_list = FileListView()
        self.file_list.set_selectable_predicate(self.controller.is_selectable)
        self.loading_label = QLabel("Loading...")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_page = QWidget()
        error_layout = QVBoxLayout(self.error_page)
        error_layout.addStretch()
        error_label = QLabel("Could not load this folder")
        error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        error_layout.addWidget(error_label)
        self.error_details_btn = QPushButton("Show details")
        self.error_details_btn.clicked.connect(self.controller.show_listing_error_detail)
        error_layout.addWidget(self.error_details_btn, 0, Qt.AlignmentFlag.AlignCenter)
        error_layout.addStretch()
        self.listing_stack.addWidget(self.file_list)
        self.listing_stack.addWidget(self.loading_label)
        self.listing_stack.addWidget(self.error_page)
        self.splitter.addWidget(self.listing_stack)
        self.splitter.setStretchFactor(1, 1)
        layout.addWidget(self.splitter)

        self.create_bottom_bar(layout)

    def create_toolbar(self):
        toolbar = QToolBar()
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.back_btn = QPushButton("Back")
        self.back_btn.setToolTip("Back (Alt+Left)")
        self.back_btn.setEnabled(False)
        toolbar.addWidget(self.back_btn)
        self.forward_btn = QPushButton("Forward")
        self.forward_btn.setToolTip("Forward (Alt+Right)")
        self.forward_btn.setEnabled(False)
        toolbar.addWidget(self.forward_btn)
        self.up_btn = QPushButton("Up")
        self.up_btn.setToolTip("Parent folder (Alt+Up)")
        toolbar.addWidget(self.up_btn)
        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.setToolTip("Refresh (F5)")
        toolbar.addWidget(self.refresh_btn)

        toolbar.addSeparator()
        self.path_navigator = PathNavigator()
        toolbar.addWidget(self.path_navigator)
        toolbar.addSeparator()

        self.refresh_remotes_btn = QPushButton("Refresh remotes")
        toolbar.addWidget(self.refresh_remotes_btn)
        self.configure_remotes_btn = QPushButton("Configure remotes")
        toolbar.addWidget(self.configure_remotes_btn)

    def create_bottom_bar(self, layout):
        bar = QWidget()
        bar_layout = QHBoxLayout(bar)
        bar_layout.setContentsMargins(6, 4, 6, 4)

        self.status_label = QLabel("")
        bar_layout.addWidget(self.status_label, 1)

        self.new_folder_btn = QPushButton("New folder")
        bar_layout.addWidget(self.new_folder_btn)
        self.confirm_btn = QPushButton("Move here")
        self.confirm_btn.setVisible(False)
        bar_layout.addWidget(self.confirm_btn)
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setVisible(False)
        bar_layout.addWidget(self.cancel_btn)

        self.queue_button = QueueButton(self.controller)
        bar_layout.addWidget(self.queue_button)
        layout.addWidget(bar)

    def setup_shortcuts(self):
        c = self.controller
        bindings = [
            ("F2", c.rename_key_pressed),
            ("F6", c.move_key_pressed),
            ("F7", c.copy_key_pressed),
            ("Shift+Del", c.delete_key_pressed),
            ("F5", c.refresh),
            ("Alt+Up", c.go_parent),
            ("Alt+Left", c.undo),
            ("Alt+Right", c.redo),
            ("Ctrl+L", self.path_navigator.toggle_edit_mode),
            ("Escape", c.cancel_destination),
        ]
        self._shortcuts = []
        for keys, handler in bindings:
            shortcut = QShortcut(QKeySequence(keys), self)
            shortcut.activated.connect(handler)
            self._shortcuts.append(shortcut)

    def setup_connections(self):
        c = self.controller
        self.back_btn.clicked.connect(c.undo)
        self.forward_btn.clicked.connect(c.redo)
        self.up_btn.clicked.connect(c.go_parent)
        self.refresh_btn.clicked.connect(c.refresh)
        self.refresh_remotes_btn.clicked.connect(c.refresh_remotes)
        self.configure_remotes_btn.clicked.connect(self.show_configure_remotes_hint)
        self.new_folder_btn.clicked.connect(self.prompt_new_folder)
        self.confirm_btn.clicked.connect(self.confirm_destination)
        self.cancel_btn.clicked.connect(c.cancel_destination)
        self.path_navigator.path_entered.connect(c.enter_path)
        self.remote_list.currentTextChanged.connect(self.on_remote_clicked)

        self.file_list.entry_selected.connect(c.select_entry)
        self.file_list.entry_activated.connect(c.activate_entry)
        self.file_list.files_dropped.connect(c.files_dropped)
        self.file_list.context_menu_requested.connect(self.show_context_menu)

        c.path_changed.connect(self.on_path_changed)
        c.listing_updated.connect(self.file_list.set_listings)
        c.listing_state_changed.connect(self.on_listing_state_changed)
        c.selection_changed.connect(self.on_selection_changed)
        c.remotes_changed.connect(self.on_remotes_changed)
        c.history_changed.connect(self.on_history_changed)
        c.error_raised.connect(self.show_error)
        c.password_required.connect(self.prompt_password)
        c.rename_requested.connect(self.prompt_rename)
        c.delete_requested.connect(self.confirm_delete)
        c.overwrite_disclaimer_requested.connect(self.show_overwrite_disclaimer)
        c.picker.subscribe(self.on_picker_mode_changed)

    # ---- Controller -> view ----
    def on_path_changed(self, path):
        self.path_navigator.set_path(path)
        self.up_btn.setEnabled(path.path_has_parent())
        remote = path.remote()
        self._syncing_remotes = True
        try:
            for i in range(self.remote_list.count()):
                if self.remote_list.item(i).text() == remote:
                    self.remote_list.setCurrentRow(i)
                    break
        finally:
            self._syncing_remotes = False

    def on_listing_state_changed(self, state):
        if state.status is ListingStatus.LOADING:
            self.listing_stack.setCurrentWidget(self.loading_label)
        elif state.status is ListingStatus.ERROR:
            self.listing_stack.setCurrentWidget(self.error_page)
        else:
            self.listing_stack.setCurrentWidget(self.file_list)

    def on_selection_changed(self, listing):
        self.file_list.select_listing(listing)
        self.update_status_label()

    def on_remotes_changed(self, remotes):
        self._syncing_remotes = True
        try:
            self.remote_list.clear()
            self.remote_list.addItems(remotes)
        finally:
            self._syncing_remotes = False

    def on_remote_clicked(self, name):
        if name and not self._syncing_remotes:
            self.controller.select_remote(name)

    def on_history_changed(self, can_undo, can_redo):
        self.back_btn.setEnabled(can_undo)
        self.forward_btn.setEnabled(can_redo)

    def on_picker_mode_changed(self, mode):
        picking = not mode.is_browse
        self.confirm_btn.setText("Copy here" if mode.kind is PickerKind.SELECT_COPY_DESTINATION else "Move here")
        self.confirm_btn.setVisible(picking)
        self.cancel_btn.setVisible(picking)
        self.new_folder_btn.setVisible(not picking)
        self.file_list.update_sensitivity()
        self.update_status_label()

    def update_status_label(self):
        mode = self.controller.picker.mode
        if not mode.is_browse:
            self.status_label.setText(f'Select folder for "{mode.source.filename()}"')
            return
        listing = self.controller.selected_listing
        if listing is None:
            self.status_label.setText("")
            return
        size = listing.formatted_size()
        suffix = f" ({size})" if size else ""
        self.status_label.setText(f'"{listing.name}" selected{suffix}')

    # ---- Dialogs ----
    def confirm_destination(self):
        if self.controller.picker.mode.kind is PickerKind.SELECT_COPY_DESTINATION:
            self.controller.confirm_copy()
        else:
            self.controller.confirm_move()

    def show_context_menu(self, global_pos):
        self.file_list.build_context_menu(self.controller).exec(global_pos)

    def prompt_new_folder(self):
        name, ok = get_folder_name(self)
        if ok and name:
            self.controller.create_folder(name)

    def prompt_rename(self, listing):
        new_name, ok = get_rename(self, listing.name)
        if ok and new_name:
            self.controller.rename(listing.path, new_name)

    def confirm_delete(self, listing):
        body = ("Are you sure? This will permanently delete the entire folder."
                if listing.is_dir else "Are you sure? This is permanent.")
        reply = QMessageBox.question(
            self, f"Deleting '{listing.name}'", body,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.controller.delete(listing.path, listing.is_dir)

    def prompt_password(self):
        password, ok = QInputDialog.getText(
            self, "Unlock", "Your rclone configuration is encrypted. Enter its password:",
            QLineEdit.EchoMode.Password
        )
        if ok:
            self.controller.submit_password(password)
        else:
            self.close()

    def show_error(self, title, detail, fatal):
        QMessageBox.warning(self, title, detail)
        if fatal:
            self.close()

    def show_configure_remotes_hint(self):
        QMessageBox.information(self, "Terminal time!", CONFIGURE_REMOTES_HINT)

    def show_overwrite_disclaimer(self):
        box = QMessageBox(self)
        box.setWindowTitle("Just so you know")
        box.setText(OVERWRITE_DISCLAIMER)
        box.addButton("OK", QMessageBox.ButtonRole.AcceptRole)
        never_button = box.addButton("Don't show again", QMessageBox.ButtonRole.RejectRole)
        box.exec()
        self.controller.dismiss_overwrite_disclaimer(box.clickedButton() == never_button)

    # ---- Settings ----
    def restore_settings(self):
        geometry = self.controller.config.get("window_geometry")
        if geometry:
            self.restoreGeometry(geometry)
        splitter_state = self.controller.config.get("splitter_state")
        if splitter_state:
            self.splitter.restoreState(splitter_state)

    def save_settings(self):
        self.controller.config.set("window_geometry", self.saveGeometry())
        self.controller.config.set("splitter_state", self.splitter.saveState())

    def closeEvent(self, a0):  # type: ignore[override]
        self.save_settings()
        super().closeEvent(a0)
