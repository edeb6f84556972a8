"""
Main application window.

Wires the Qt widgets to the TabManager. Every user action is applied to the
core synchronously; opening documents and rasterizing pages happen on
background workers whose results arrive as signals.
"""

import logging
import os
import sys
from typing import List, Optional, Set, Tuple

from PySide6.QtGui import QColor, QKeySequence, QPalette, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTabBar,
    QVBoxLayout,
    QWidget,
)

from .backends import FitzDocumentSource
from .core.backend import DocumentSource, PageBuffer
from .core.cache import zoom_bucket
from .core.config import ViewerSettings, load_settings, save_settings
from .core.errors import OpenFailed
from .core.log import setup_logging
from .core.session import DocumentSession
from .core.tabs import TabManager
from .ui.widgets import PageView
from .ui.workers import DocumentLoader, PageRenderer

logger = logging.getLogger(__name__)

DOCUMENT_FILTER = "Documents (*.pdf *.xps *.epub *.cbz);;All Files (*)"

RenderKey = Tuple[DocumentSession, int, int]


class QuireWindow(QMainWindow):
    """
    The main application window.
    Handles tab management, the toolbar and the page view.
    """

    def __init__(
        self,
        source: Optional[DocumentSource] = None,
        settings: Optional[ViewerSettings] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Quire")
        self.resize(1100, 850)

        self.source: DocumentSource = source or FitzDocumentSource()
        self.settings: ViewerSettings = settings or load_settings()
        self.tabs = TabManager(self.settings.cache_capacity, self.settings.eviction)

        self._workers: Set[object] = set()
        self._pending: Set[RenderKey] = set()
        self._failed: Set[RenderKey] = set()
        self._closing = False

        self.setup_ui()
        self.setup_menu()
        self.apply_theme()
        self._init_shortcuts()
        self.refresh()

    def setup_ui(self) -> None:
        """Constructs the visual hierarchy."""
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.tab_bar = QTabBar()
        self.tab_bar.setTabsClosable(True)
        self.tab_bar.setExpanding(False)
        self.tab_bar.currentChanged.connect(self.select_tab)
        self.tab_bar.tabCloseRequested.connect(self.close_tab)
        layout.addWidget(self.tab_bar)

        self.toolbar = QWidget()
        self.toolbar.setFixedHeight(50)
        t_layout = QHBoxLayout(self.toolbar)

        self.btn_open = QPushButton("Open")
        self.btn_open.clicked.connect(self.open_dialog)
        self.btn_reload = QPushButton("Reload")
        self.btn_reload.clicked.connect(self.reload_active)

        self.btn_zoom_out = QPushButton("−")
        self.btn_zoom_out.clicked.connect(lambda: self._apply(self.tabs.zoom_out))
        self.lbl_zoom = QLabel()
        self.btn_zoom_in = QPushButton("+")
        self.btn_zoom_in.clicked.connect(lambda: self._apply(self.tabs.zoom_in))
        self.btn_zoom_reset = QPushButton("Reset")
        self.btn_zoom_reset.clicked.connect(lambda: self._apply(self.tabs.reset_zoom))

        self.lbl_page = QLabel()
        self.btn_prev = QPushButton("◀")
        self.btn_prev.clicked.connect(lambda: self._apply(self.tabs.previous_page))
        self.btn_next = QPushButton("▶")
        self.btn_next.clicked.connect(lambda: self._apply(self.tabs.next_page))

        for w in (self.btn_open, self.btn_reload):
            t_layout.addWidget(w)
        t_layout.addStretch()
        for w in (self.btn_zoom_out, self.lbl_zoom, self.btn_zoom_in, self.btn_zoom_reset):
            t_layout.addWidget(w)
        t_layout.addStretch()
        for w in (self.lbl_page, self.btn_prev, self.btn_next):
            t_layout.addWidget(w)
        layout.addWidget(self.toolbar)

        self.page_view = PageView()
        self.page_view.pan_requested.connect(
            lambda dx, dy: self._apply(self.tabs.pan, dx, dy)
        )
        self.page_view.zoom_requested.connect(self._on_wheel_zoom)
        layout.addWidget(self.page_view, 1)

        self.setCentralWidget(central)

    def setup_menu(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")

        open_action = file_menu.addAction("Open...")
        open_action.triggered.connect(self.open_dialog)

        self.recent_menu = file_menu.addMenu("Open Recent")
        self.recent_menu.aboutToShow.connect(self.rebuild_recent_menu)
        self.rebuild_recent_menu()

        reload_action = file_menu.addAction("Reload")
        reload_action.triggered.connect(self.reload_active)

        close_action = file_menu.addAction("Close Tab")
        close_action.triggered.connect(
            lambda: self.close_tab(self.tab_bar.currentIndex())
        )

        file_menu.addSeparator()
        quit_action = file_menu.addAction("Quit")
        quit_action.triggered.connect(self.close)

    def rebuild_recent_menu(self) -> None:
        """Lists the recently opened files, most recent first."""
        self.recent_menu.clear()
        for path in self.settings.recent_files:
            action = self.recent_menu.addAction(os.path.basename(path) or path)
            action.setToolTip(path)
            action.triggered.connect(lambda checked=False, p=path: self.open_path(p))
        self.recent_menu.setEnabled(bool(self.settings.recent_files))

    def _init_shortcuts(self) -> None:
        """Initializes keyboard shortcuts."""
        shortcuts = [
            (QKeySequence.StandardKey.Open, self.open_dialog),
            (QKeySequence.StandardKey.Refresh, self.reload_active),
            (QKeySequence.StandardKey.ZoomIn, lambda: self._apply(self.tabs.zoom_in)),
            (QKeySequence.StandardKey.ZoomOut, lambda: self._apply(self.tabs.zoom_out)),
            ("Ctrl+0", lambda: self._apply(self.tabs.reset_zoom)),
            ("Right", lambda: self._apply(self.tabs.next_page)),
            ("Left", lambda: self._apply(self.tabs.previous_page)),
            ("Home", lambda: self._apply(self.tabs.set_page, 0)),
            ("Ctrl+W", lambda: self.close_tab(self.tab_bar.currentIndex())),
        ]
        for seq, slot in shortcuts:
            QShortcut(QKeySequence(seq), self).activated.connect(slot)

    def apply_theme(self) -> None:
        """Updates colors for dark/light mode."""
        dark = self.settings.dark_mode
        pal = self.palette()
        color = QColor(30, 30, 30) if dark else QColor(240, 240, 240)
        pal.setColor(QPalette.ColorRole.Window, color)
        self.setPalette(pal)

        fg = "#ddd" if dark else "#111"
        self.toolbar.setStyleSheet(f"""
            QWidget {{ background: {color.name()}; color: {fg}; }}
            QPushButton {{
                border: 1px solid transparent;
                padding: 6px;
                border-radius: 4px;
                background: transparent;
            }}
            QPushButton:hover {{ background: rgba(128, 128, 128, 0.2); }}
            QPushButton:disabled {{ color: #777; }}
        """)
        self.page_view.dark_mode = dark
        self.page_view.update()

    # Commands

    def _apply(self, command, *args) -> None:
        """Runs a TabManager command, then redraws."""
        command(*args)
        self._failed.clear()
        self.refresh()

    def _on_wheel_zoom(self, step: int) -> None:
        self._apply(self.tabs.zoom_in if step > 0 else self.tabs.zoom_out)

    def open_dialog(self) -> None:
        paths, _ = QFileDialog.getOpenFileNames(
            self, "Open Document", self.settings.last_directory, DOCUMENT_FILTER
        )
        for path in paths:
            self.open_path(path)

    def open_path(self, path: str) -> None:
        """Starts loading a document on a background thread."""
        loader = DocumentLoader(
            path, self.source, self.settings.cache_capacity, self.settings.eviction
        )
        loader.loaded.connect(self._on_document_loaded)
        loader.failed.connect(self._on_document_failed)
        self._start(loader)

    def _on_document_loaded(self, session: DocumentSession) -> None:
        if self._closing:
            session.close()
            return
        index = self.tabs.add(session)
        self.tab_bar.blockSignals(True)
        self.tab_bar.addTab(session.display_name())
        self.tab_bar.setTabToolTip(index, session.path)
        self.tab_bar.setCurrentIndex(index)
        self.tab_bar.blockSignals(False)

        self.settings.last_directory = os.path.dirname(session.path)
        self.settings.remember_file(session.path)
        save_settings(self.settings)
        self.refresh()

    def _on_document_failed(self, path: str, reason: str) -> None:
        if self._closing:
            return
        QMessageBox.warning(
            self, "Open Document", f"Cannot open {os.path.basename(path)}.\n{reason}"
        )

    def reload_active(self) -> None:
        session = self.tabs.active
        if session is None:
            return
        try:
            session.reload(self.source)
        except OpenFailed as e:
            logger.warning("%s", e)
            QMessageBox.warning(self, "Reload Document", str(e))
            return
        self._pending = {k for k in self._pending if k[0] is not session}
        self._failed.clear()
        self.refresh()

    def select_tab(self, index: int) -> None:
        self._apply(self.tabs.select, index)

    def close_tab(self, index: int) -> None:
        if not 0 <= index < len(self.tabs):
            return
        session = self.tabs[index]
        self.tabs.close(index)
        self._pending = {k for k in self._pending if k[0] is not session}

        self.tab_bar.blockSignals(True)
        self.tab_bar.removeTab(index)
        if self.tabs.active_index is not None:
            self.tab_bar.setCurrentIndex(self.tabs.active_index)
        self.tab_bar.blockSignals(False)
        self.refresh()

    # Rendering

    def refresh(self) -> None:
        """Synchronizes the toolbar and the page view with the active tab."""
        session = self.tabs.active
        for w in (self.btn_reload, self.btn_zoom_out, self.btn_zoom_in, self.btn_zoom_reset):
            w.setEnabled(session is not None)

        if session is None:
            self.lbl_zoom.setText("")
            self.lbl_page.setText("")
            self.btn_prev.setEnabled(False)
            self.btn_next.setEnabled(False)
            self.setWindowTitle("Quire")
            self.page_view.show_placeholder("Open a document to get started")
            return

        vp = session.viewport
        self.setWindowTitle(f"{session.display_name()} - Quire")
        self.lbl_zoom.setText(f"{vp.zoom_percent}%")
        self.lbl_page.setText(f"Page {vp.current_page + 1} of {session.page_count}")
        self.btn_prev.setEnabled(vp.can_go_previous)
        self.btn_next.setEnabled(vp.can_go_next)

        image = session.cache.lookup(vp.current_page, vp.zoom)
        if image is not None:
            self.page_view.show_page(image, vp.pan_x, vp.pan_y)
            return

        key = (session, vp.current_page, zoom_bucket(vp.zoom))
        if key in self._failed:
            self.page_view.show_placeholder(f"Cannot render page {vp.current_page + 1}.")
            return
        self.page_view.show_placeholder("Rendering page...")
        if key not in self._pending:
            self._request_render(session, vp.current_page, vp.zoom)

    def _request_render(self, session: DocumentSession, page: int, zoom: float) -> None:
        key = (session, page, zoom_bucket(zoom))
        self._pending.add(key)
        worker = PageRenderer(session.renderer, page, zoom)
        worker.rendered.connect(
            lambda p, z, buf, w=worker, s=session: self._on_page_rendered(s, w, buf)
        )
        worker.failed.connect(
            lambda p, z, reason, w=worker, s=session: self._on_page_failed(s, w, reason)
        )
        self._start(worker)

    def _is_current(self, session: DocumentSession, worker: PageRenderer) -> bool:
        """False once the tab was closed or its document reloaded."""
        return session in self.tabs.sessions and session.renderer is worker.renderer

    def _on_page_rendered(
        self, session: DocumentSession, worker: PageRenderer, buffer: PageBuffer
    ) -> None:
        page, zoom = worker.page_index, worker.zoom
        self._pending.discard((session, page, zoom_bucket(zoom)))
        if not self._is_current(session, worker):
            return
        # A superseded render is still cached for later reuse.
        session.cache.insert(page, zoom, buffer)
        if session is self.tabs.active:
            self.refresh()

    def _on_page_failed(
        self, session: DocumentSession, worker: PageRenderer, reason: str
    ) -> None:
        page, zoom = worker.page_index, worker.zoom
        key = (session, page, zoom_bucket(zoom))
        self._pending.discard(key)
        if not self._is_current(session, worker):
            return
        logger.error(
            "%s: cannot render page %d: %s", session.display_name(), page + 1, reason
        )
        self._failed.add(key)
        if session is self.tabs.active:
            self.refresh()

    def _start(self, worker) -> None:
        self._workers.add(worker)
        worker.finished.connect(lambda w=worker: self._on_worker_finished(w))
        worker.start()

    def _on_worker_finished(self, worker) -> None:
        worker.wait()
        self._workers.discard(worker)

    def closeEvent(self, event) -> None:
        """Waits for running workers and releases every open document."""
        self._closing = True
        for worker in list(self._workers):
            worker.wait()
            # Sessions still queued for delivery never reach the tab manager.
            if isinstance(worker, DocumentLoader) and worker.session is not None:
                if worker.session not in self.tabs.sessions:
                    worker.session.close()
        self.tabs.close_all()
        save_settings(self.settings)
        super().closeEvent(event)


def run(argv: Optional[List[str]] = None) -> None:
    argv = list(sys.argv if argv is None else argv)
    setup_logging()
    app = QApplication(argv)
    app.setApplicationName("Quire")
    window = QuireWindow()
    for path in argv[1:]:
        window.open_path(path)
    window.show()
    sys.exit(app.exec())
