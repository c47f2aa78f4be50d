"""
Listing view widget - shows the entries of the current rclone location
"""
from PyQt6.QtWidgets import (QTreeWidget, QTreeWidgetItem, QHeaderView, QAbstractItemView,
                             QMenu)
from PyQt6.QtCore import pyqtSignal, Qt

LISTING_ROLE = Qt.ItemDataRole.UserRole


class FileListView(QTreeWidget):
    """Name / Size / Modified columns; accepts local files dropped from other apps"""

    entry_selected = pyqtSignal(object)  # Optional[FileListing]
    entry_activated = pyqtSignal(object)  # FileListing
    files_dropped = pyqtSignal(list)  # List[str] of local paths
    context_menu_requested = pyqtSignal(object)  # QPoint (global)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._selectable = lambda listing: True
        self._updating = False
        self.setup_ui()

    def setup_ui(self):
        self.setHeaderLabels(["Name", "Size", "Modified"])
        self.setRootIsDecorated(False)
        self.setUniformRowHeights(True)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setAcceptDrops(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DropOnly)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        header = self.header()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        header.setStretchLastSection(False)
        self.resizeColumnToContents(1)

        self.itemSelectionChanged.connect(self._on_selection_changed)
        self.itemActivated.connect(self._on_item_activated)
        self.customContextMenuRequested.connect(
            lambda pos: self.context_menu_requested.emit(self.viewport().mapToGlobal(pos)))

    def set_selectable_predicate(self, predicate):
        self._selectable = predicate
        self.update_sensitivity()

    def set_listings(self, listings):
        """Replace all rows with the given (already sorted) listings"""
        self._updating = True
        try:
            self.clear()
            for listing in listings:
                item = QTreeWidgetItem([
                    ("\U0001F4C1 " if listing.is_dir else "") + listing.name,
                    listing.formatted_size() or "",
                    listing.mod_time.astimezone().strftime("%Y-%m-%d %H:%M"),
                ])
                item.setData(0, LISTING_ROLE, listing)
                self.addTopLevelItem(item)
        finally:
            self._updating = False
        self.update_sensitivity()

    def update_sensitivity(self):
        """Grey out entries that cannot be picked in the current mode"""
        for i in range(self.topLevelItemCount()):
            item = self.topLevelItem(i)
            listing = item.data(0, LISTING_ROLE)
            flags = item.flags()
            if self._selectable(listing):
                flags |= Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
            else:
                flags &= ~(Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable)
            item.setFlags(flags)

    def listing_at(self, row):
        item = self.topLevelItem(row)
        return item.data(0, LISTING_ROLE) if item else None

    def select_listing(self, listing):
        """Mirror the controller's selection without echoing it back"""
        self._updating = True
        try:
            self.clearSelection()
            if listing is None:
                return
            for i in range(self.topLevelItemCount()):
                item = self.topLevelItem(i)
                if item.data(0, LISTING_ROLE) == listing:
                    item.setSelected(True)
                    self.setCurrentItem(item)
                    break
        finally:
            self._updating = False

    def _on_selection_changed(self):
        if self._updating:
            return
        items = self.selectedItems()
        self.entry_selected.emit(items[0].data(0, LISTING_ROLE) if items else None)

    def _on_item_activated(self, item, _column):
        listing = item.data(0, LISTING_ROLE)
        if listing is not None:
            self.entry_activated.emit(listing)

    # ---- Drops from the desktop become uploads ----
    def _local_paths(self, event):
        mime = event.mimeData()
        if not mime or not mime.hasUrls():
            return []
        return [u.toLocalFile() for u in mime.urls() if u.isLocalFile()]

    def dragEnterEvent(self, event):
        if self._local_paths(event):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if self._local_paths(event):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event):
        paths = self._local_paths(event)
        if paths:
            event.acceptProposedAction()
            self.files_dropped.emit(paths)
        else:
            event.ignore()

    def build_context_menu(self, controller):
        menu = QMenu(self)
        for label, handler in (("Rename", controller.rename_key_pressed),
                               ("Move", controller.move_key_pressed),
                               ("Copy", controller.copy_key_pressed),
                               ("Delete", controller.delete_key_pressed)):
            action = menu.addAction(label)
            action.triggered.connect(lambda checked=False, h=handler: h())
        return menu
