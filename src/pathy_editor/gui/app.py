"""PySide6/PyQtGraph GUI for path authoring."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QColor, QFont, QGuiApplication, QKeySequence, QPalette
from PySide6.QtWidgets import (
    QApplication,
    QDoubleSpinBox,
    QInputDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QSplitter,
    QToolBar,
)

from ..config import EditorConfig
from ..core.editor import EditMode, PathEditor
from ..settings import get_settings
from .canvas import PathCanvas

logger = logging.getLogger(__name__)

MODE_ACTIONS = (
    (EditMode.CREATE, "Create", "C"),
    (EditMode.INSERT, "Insert", "I"),
    (EditMode.DELETE, "Delete", "D"),
    (EditMode.TRIM, "Trim", "T"),
)


class PathyWindow(QMainWindow):
    """Main window: mode toolbar, field canvas and generated program pane."""

    def __init__(self, config: Optional[EditorConfig] = None):
        super().__init__()
        self.setWindowTitle("Pathy")
        self.editor = PathEditor(config)
        self._mode_actions: Dict[EditMode, QAction] = {}

        self.canvas = PathCanvas(self.editor, self)
        self.canvas.programChanged.connect(self._on_program_changed)

        self.program_view = QPlainTextEdit(self)
        self.program_view.setReadOnly(True)
        self.program_view.setFont(QFont("monospace"))
        self.program_view.setPlainText(self.editor.program)

        splitter = QSplitter(Qt.Orientation.Horizontal, self)
        splitter.addWidget(self.canvas)
        splitter.addWidget(self.program_view)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        self.setCentralWidget(splitter)

        self._build_toolbar()
        self._refresh_size_lock()
        self.statusBar().showMessage("Select a mode to start editing")
        self.resize(1280, 800)

    # Toolbar ---------------------------------------------------------------

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Path", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        group = QActionGroup(self)
        group.setExclusionPolicy(QActionGroup.ExclusionPolicy.ExclusiveOptional)
        for mode, label, shortcut in MODE_ACTIONS:
            action = QAction(label, self)
            action.setCheckable(True)
            action.setShortcut(QKeySequence(shortcut))
            action.triggered.connect(lambda _checked=False, m=mode: self._select_mode(m))
            group.addAction(action)
            toolbar.addAction(action)
            self._mode_actions[mode] = action

        toolbar.addSeparator()
        clear_action = QAction("Clear", self)
        clear_action.triggered.connect(self._clear_path)
        toolbar.addAction(clear_action)

        import_action = QAction("Import JSON...", self)
        import_action.triggered.connect(self._import_json)
        toolbar.addAction(import_action)

        copy_program_action = QAction("Copy Program", self)
        copy_program_action.triggered.connect(self._copy_program)
        toolbar.addAction(copy_program_action)

        copy_json_action = QAction("Copy JSON", self)
        copy_json_action.triggered.connect(self._copy_json)
        toolbar.addAction(copy_json_action)

        toolbar.addSeparator()
        toolbar.addWidget(QLabel("Field (in): ", self))
        width, height = self.editor.field_size
        self.width_spin = self._make_size_spin(width)
        self.height_spin = self._make_size_spin(height)
        toolbar.addWidget(self.width_spin)
        toolbar.addWidget(QLabel(" x ", self))
        toolbar.addWidget(self.height_spin)

    def _make_size_spin(self, value: float) -> QDoubleSpinBox:
        spin = QDoubleSpinBox(self)
        spin.setRange(1.0, 1000.0)
        spin.setDecimals(1)
        spin.setSingleStep(0.5)
        spin.setValue(value)
        spin.editingFinished.connect(self._apply_field_size)
        return spin

    # Actions ---------------------------------------------------------------

    def _select_mode(self, mode: EditMode) -> None:
        active = self.editor.set_mode(mode)
        for action_mode, action in self._mode_actions.items():
            action.setChecked(action_mode is active)
        self.statusBar().showMessage(f"Mode: {active.value}")

    def _clear_path(self) -> None:
        self.editor.clear()

    def _apply_field_size(self) -> None:
        if self.editor.set_field_size(self.width_spin.value(), self.height_spin.value()):
            self.canvas.builder.config = self.editor.config
            self.canvas.fit_field()

    def _import_json(self) -> None:
        text, ok = QInputDialog.getMultiLineText(self, "Import JSON", "Path records:")
        if not ok or not text.strip():
            return
        if not self.editor.load_json(text):
            QMessageBox.warning(
                self,
                "Import JSON",
                "The path could not be loaded. Check that every record has an id and numeric coordinates.",
            )

    def _copy_program(self) -> None:
        QGuiApplication.clipboard().setText(self.editor.program)
        self.statusBar().showMessage("Program copied to clipboard", 3000)

    def _copy_json(self) -> None:
        QGuiApplication.clipboard().setText(self.editor.to_json())
        self.statusBar().showMessage("Path JSON copied to clipboard", 3000)

    def _on_program_changed(self, program: str) -> None:
        self.program_view.setPlainText(program)
        self._refresh_size_lock()

    def _refresh_size_lock(self) -> None:
        locked = not self.editor.path.is_empty()
        self.width_spin.setEnabled(not locked)
        self.height_spin.setEnabled(not locked)

    def closeEvent(self, event):
        self.canvas.stop()
        super().closeEvent(event)


def _apply_palette(app: QApplication, theme: str) -> None:
    app.setStyle("Fusion")
    if theme != "dark":
        return
    dark_palette = QPalette()
    dark_palette.setColor(QPalette.ColorRole.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ColorRole.WindowText, QColor(255, 255, 255))
    dark_palette.setColor(QPalette.ColorRole.Base, QColor(35, 35, 35))
    dark_palette.setColor(QPalette.ColorRole.AlternateBase, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ColorRole.Text, QColor(255, 255, 255))
    dark_palette.setColor(QPalette.ColorRole.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ColorRole.ButtonText, QColor(255, 255, 255))
    dark_palette.setColor(QPalette.ColorRole.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.ColorRole.HighlightedText, QColor(35, 35, 35))
    app.setPalette(dark_palette)


def run(config: Optional[EditorConfig] = None) -> int:
    app = QApplication.instance() or QApplication([])
    _apply_palette(app, get_settings().theme)

    window = PathyWindow(config)
    window.show()
    return app.exec()
