"""
PySide6 desktop GUI for movie_grid.

Launch:
    python -m movie_grid --gui
    python -m movie_grid.gui
"""

import os
import subprocess
import sys
import traceback
from pathlib import Path

# Work around Wayland protocol errors on WSL2 (Qt6 defaults to Wayland
# via WSLg, which triggers buffer-size mismatches with the compositor).
if hasattr(os, "uname") and "microsoft" in os.uname().release.lower():
    os.environ.setdefault("QT_QPA_PLATFORM", "xcb")

try:
    from PySide6.QtCore import QThread, Signal, QObject, Qt, QUrl, QTimer, QElapsedTimer
    from PySide6.QtGui import QDesktopServices, QFont, QTextCursor, QColor, QBrush
    from PySide6.QtWidgets import (
        QApplication,
        QCheckBox,
        QDialog,
        QFileDialog,
        QFormLayout,
        QFrame,
        QGroupBox,
        QHBoxLayout,
        QHeaderView,
        QLabel,
        QLineEdit,
        QMainWindow,
        QPushButton,
        QSizePolicy,
        QTableWidget,
        QTableWidgetItem,
        QTextEdit,
        QVBoxLayout,
        QWidget,
    )
except ImportError:
    print(
        "PySide6 is required for the GUI.\n"
        "Install it with:  pip install PySide6"
    )
    sys.exit(1)

from . import __version__
from . import config
from .config import GridSettings
from .parser import find_vault_root
from .sync import STEP_NAMES, SyncStatus, sync_vault
from .vault import FileSystemVault


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

STEP_ICONS = {
    "pending": "\u25CB",   # ○
    "running": "\u25CF",   # ●
    "done":    "\u2713",   # ✓
    "error":   "\u2717",   # ✗
    "skip":    "\u2014",   # —
}

STEP_COLORS = {
    "pending": "",
    "running": "color: #2196F3;",
    "done":    "color: #4CAF50;",
    "error":   "color: #F44336;",
    "skip":    "color: gray;",
}

STEP_BG_COLORS = {
    "pending": "",
    "running": "background-color: #E3F2FD; border-radius: 4px;",
    "done":    "background-color: #E8F5E9; border-radius: 4px;",
    "error":   "background-color: #FFEBEE; border-radius: 4px;",
    "skip":    "",
}

ROW_COLOR_MOVED   = QColor("#E8F5E9")
ROW_COLOR_NEUTRAL = QColor("#F5F5F5")


# ---------------------------------------------------------------------------
# stdout capture → Qt signal
# ---------------------------------------------------------------------------

class StdoutRedirector(QObject):
    """Captures writes to sys.stdout and emits them as a Qt signal."""

    text_written = Signal(str)

    def __init__(self):
        super().__init__()

    def write(self, text: str):
        if text:
            self.text_written.emit(text)

    def flush(self):
        pass


# ---------------------------------------------------------------------------
# Sync worker thread
# ---------------------------------------------------------------------------

class SyncWorker(QThread):
    """Runs one grid sync off the main thread."""

    step_update  = Signal(str, str, str)       # step_name, status, detail
    notice       = Signal(str)                 # transient message
    record_added = Signal(str, str, str, bool) # title, poster, date, poster_moved
    finished_ok  = Signal(str, int, int)       # status, added, moved
    finished_err = Signal(str)

    def __init__(self, path: str, settings: GridSettings, dry_run: bool):
        super().__init__()
        self.path = path
        self.settings = settings
        self.dry_run = dry_run

    def run(self):
        try:
            target = Path(self.path)
            if not target.is_dir():
                self.finished_err.emit(f"'{self.path}' is not a valid folder.")
                return

            storage = FileSystemVault(find_vault_root(target))
            result = sync_vault(
                storage,
                self.settings,
                dry_run=self.dry_run,
                notify=self.notice.emit,
                on_step=self.step_update.emit,
            )

            moved_titles = {m.title for m in result.moves if m.moved}
            for record in result.records:
                self.record_added.emit(
                    record.title, record.poster, record.date,
                    record.title in moved_titles,
                )
            self.finished_ok.emit(result.status.value, result.added, result.moved)
        except Exception as e:
            print(f"[error] {traceback.format_exc()}")
            self.finished_err.emit(f"{type(e).__name__}: {e}")


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"Movie Grid Sync v{__version__}")
        self.resize(800, 640)

        self._worker: SyncWorker | None = None
        self._redirector = StdoutRedirector()
        self._redirector.text_written.connect(self._append_details)
        self._step_timers: dict[str, QElapsedTimer] = {}
        self._vault_root = ""
        self._posters_dir = ""

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)

        # ==================== INPUT ZONE ====================
        input_zone = QWidget()
        input_zone.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Fixed)
        input_lay = QVBoxLayout(input_zone)
        input_lay.setContentsMargins(0, 0, 0, 0)

        # -- Vault path -----------------------------------------------------
        grp_input = QGroupBox("Vault")
        h = QHBoxLayout(grp_input)
        self.input_edit = QLineEdit()
        self.input_edit.setPlaceholderText("Select your vault folder…")
        btn_dir = QPushButton("Browse…")
        btn_dir.clicked.connect(self._browse_dir)
        h.addWidget(self.input_edit, 1)
        h.addWidget(btn_dir)
        input_lay.addWidget(grp_input)

        # -- Settings -------------------------------------------------------
        cfg = config.load()
        grp_settings = QGroupBox("Settings")
        form = QFormLayout(grp_settings)
        self.index_edit = QLineEdit(cfg.get("index_note") or config.DEFAULT_INDEX_NOTE)
        self.posters_edit = QLineEdit(cfg.get("posters_dir") or config.DEFAULT_POSTERS_DIR)
        self.prefix_edit = QLineEdit(cfg.get("poster_prefix") or config.DEFAULT_POSTER_PREFIX)
        self.tag_edit = QLineEdit(cfg.get("fence_tag") or config.DEFAULT_FENCE_TAG)
        form.addRow("Index note", self.index_edit)
        form.addRow("Posters folder", self.posters_edit)
        form.addRow("Poster prefix", self.prefix_edit)
        form.addRow("Fence tag", self.tag_edit)
        input_lay.addWidget(grp_settings)

        if cfg.get("vault_path"):
            self.input_edit.setText(cfg["vault_path"])

        # -- Options --------------------------------------------------------
        h3 = QHBoxLayout()
        self.chk_dry = QCheckBox("Dry run")
        h3.addWidget(self.chk_dry)
        h3.addStretch()
        input_lay.addLayout(h3)

        # -- Action button --------------------------------------------------
        self.btn_action = QPushButton("Sync Grid")
        self.btn_action.setFixedHeight(36)
        self.btn_action.clicked.connect(self._start_sync)
        input_lay.addWidget(self.btn_action)

        main_layout.addWidget(input_zone)

        # ==================== SEPARATOR ====================
        separator = QFrame()
        separator.setFrameShape(QFrame.Shape.HLine)
        separator.setFrameShadow(QFrame.Shadow.Sunken)
        main_layout.addWidget(separator)

        # ==================== OUTPUT ZONE ====================
        output_zone = QWidget()
        output_lay = QVBoxLayout(output_zone)
        output_lay.setContentsMargins(0, 4, 0, 0)

        # -- Progress section -----------------------------------------------
        self.progress_section = QWidget()
        self.progress_section.setSizePolicy(
            QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Maximum
        )
        prog_lay = QVBoxLayout(self.progress_section)
        prog_lay.setContentsMargins(0, 4, 0, 0)
        prog_lay.setSpacing(1)

        self.progress_header = QLabel()
        self.progress_header.setStyleSheet("font-weight: bold; font-size: 13px;")
        prog_lay.addWidget(self.progress_header)

        self.step_rows: dict[str, tuple[QLabel, QLabel, QLabel, QFrame]] = {}
        for name in STEP_NAMES:
            frame = QFrame()
            frame.setStyleSheet("padding: 1px 4px; border-radius: 4px;")
            row_lay = QHBoxLayout(frame)
            row_lay.setContentsMargins(4, 1, 4, 1)

            icon_lbl = QLabel(STEP_ICONS["pending"])
            icon_font = icon_lbl.font()
            icon_font.setPointSize(14)
            icon_lbl.setFont(icon_font)
            icon_lbl.setFixedWidth(24)

            name_lbl = QLabel(name)

            detail_lbl = QLabel("")
            detail_lbl.setStyleSheet("color: gray;")

            time_lbl = QLabel("")
            time_lbl.setStyleSheet("color: #888; font-size: 11px;")
            time_lbl.setFixedWidth(60)
            time_lbl.setAlignment(
                Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
            )

            row_lay.addWidget(icon_lbl)
            row_lay.addWidget(name_lbl)
            row_lay.addWidget(detail_lbl, 1)
            row_lay.addWidget(time_lbl)

            prog_lay.addWidget(frame)
            self.step_rows[name] = (icon_lbl, detail_lbl, time_lbl, frame)

        output_lay.addWidget(self.progress_section)
        self.progress_section.hide()

        # -- Notice ---------------------------------------------------------
        self.notice_label = QLabel("")
        self.notice_label.setStyleSheet(
            "background-color: #FFF8E1; border: 1px solid #FFE082;"
            "border-radius: 4px; padding: 6px;"
        )
        output_lay.addWidget(self.notice_label)
        self.notice_label.hide()

        # -- Button row -----------------------------------------------------
        btn_row = QHBoxLayout()
        self.details_btn = QPushButton("Show Log")
        self.details_btn.setFixedWidth(80)
        self.details_btn.clicked.connect(self._toggle_details)
        btn_row.addWidget(self.details_btn)
        self.details_btn.hide()

        self.open_posters_btn = QPushButton("Open Posters Folder")
        self.open_posters_btn.setFixedWidth(150)
        self.open_posters_btn.clicked.connect(self._open_posters_folder)
        btn_row.addWidget(self.open_posters_btn)
        self.open_posters_btn.hide()

        btn_row.addStretch()
        output_lay.addLayout(btn_row)

        # -- Results --------------------------------------------------------
        self.results_section = QWidget()
        res_lay = QVBoxLayout(self.results_section)
        res_lay.setContentsMargins(0, 8, 0, 0)

        self.results_header = QLabel("Added to grid")
        self.results_header.setStyleSheet("font-weight: bold;")
        res_lay.addWidget(self.results_header)

        self.results_table = QTableWidget(0, 3)
        self.results_table.setHorizontalHeaderLabels(["Title", "Poster", "Date"])
        self.results_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.results_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.results_table.verticalHeader().setVisible(False)
        self.results_table.setMinimumHeight(150)
        header = self.results_table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        res_lay.addWidget(self.results_table)

        output_lay.addWidget(self.results_section, 1)
        self.results_section.hide()

        # -- Details log dialog (separate window) ---------------------------
        self._details_dialog = QDialog(self)
        self._details_dialog.setWindowTitle("Log Output")
        self._details_dialog.resize(700, 400)
        dlg_lay = QVBoxLayout(self._details_dialog)

        self.details_area = QTextEdit()
        self.details_area.setReadOnly(True)
        self.details_area.setFont(QFont("Consolas", 9))
        dlg_lay.addWidget(self.details_area)

        dlg_btn_row = QHBoxLayout()
        dlg_btn_row.addStretch()
        self.copy_details_btn = QPushButton("Copy All")
        self.copy_details_btn.setFixedWidth(80)
        self.copy_details_btn.clicked.connect(self._copy_details)
        dlg_btn_row.addWidget(self.copy_details_btn)
        dlg_lay.addLayout(dlg_btn_row)

        main_layout.addWidget(output_zone, 1)

    # -- helpers ------------------------------------------------------------

    def _browse_dir(self):
        path = QFileDialog.getExistingDirectory(self, "Select vault folder")
        if path:
            self.input_edit.setText(path)

    def _current_settings(self) -> GridSettings:
        return GridSettings(
            index_note=self.index_edit.text().strip() or config.DEFAULT_INDEX_NOTE,
            posters_dir=(self.posters_edit.text().strip() or config.DEFAULT_POSTERS_DIR).rstrip("/"),
            poster_prefix=(self.prefix_edit.text().strip() or config.DEFAULT_POSTER_PREFIX).rstrip("/"),
            fence_tag=self.tag_edit.text().strip() or config.DEFAULT_FENCE_TAG,
        )

    def _save_settings(self, vault_path: str, settings: GridSettings):
        cfg = config.load()
        updated = dict(cfg)
        updated.update({
            "vault_path": vault_path,
            "index_note": settings.index_note,
            "posters_dir": settings.posters_dir,
            "poster_prefix": settings.poster_prefix,
            "fence_tag": settings.fence_tag,
        })
        if updated != cfg:
            config.save(updated)

    # -- start action -------------------------------------------------------

    def _start_sync(self):
        vault_path = self.input_edit.text().strip()
        if not vault_path:
            self._show_validation_error("Please select a vault folder.")
            return

        settings = self._current_settings()
        self._save_settings(vault_path, settings)
        self._vault_root = vault_path
        self._posters_dir = settings.posters_dir

        self._reset_ui_state()

        # Redirect stdout for the duration of the worker
        self._old_stdout = sys.stdout
        sys.stdout = self._redirector

        self.progress_section.show()
        self.progress_header.setText("Syncing…")

        self._worker = SyncWorker(vault_path, settings, dry_run=self.chk_dry.isChecked())
        self._worker.step_update.connect(self._on_step_update)
        self._worker.notice.connect(self._on_notice)
        self._worker.record_added.connect(self._on_record_added)
        self._worker.finished_ok.connect(self._on_done)
        self._worker.finished_err.connect(self._on_error)
        self._worker.start()

    def _reset_ui_state(self):
        self.details_area.clear()
        self.results_table.setRowCount(0)
        self.results_section.hide()
        self.notice_label.hide()
        self.open_posters_btn.hide()
        self._details_dialog.hide()
        self._reset_steps()
        self.details_btn.show()
        self.btn_action.setEnabled(False)

    def _show_validation_error(self, msg: str):
        self.progress_section.show()
        self.progress_header.setText(f"✗ {msg}")
        self.progress_header.setStyleSheet("font-weight: bold; font-size: 13px; color: #F44336;")
        self._reset_steps()

    def _reset_steps(self):
        for icon_lbl, detail_lbl, time_lbl, frame in self.step_rows.values():
            icon_lbl.setText(STEP_ICONS["pending"])
            icon_lbl.setStyleSheet("")
            detail_lbl.setText("")
            time_lbl.setText("")
            frame.setStyleSheet("padding: 1px 4px; border-radius: 4px;")
        self._step_timers.clear()

    def _restore_stdout(self):
        sys.stdout = self._old_stdout

    # -- signal handlers ----------------------------------------------------

    def _on_step_update(self, step_name: str, status: str, detail: str):
        """Update the icon, colour, background, and detail label for a single step row."""
        if step_name not in self.step_rows:
            return
        icon_lbl, detail_lbl, time_lbl, frame = self.step_rows[step_name]
        icon_lbl.setText(STEP_ICONS.get(status, STEP_ICONS["pending"]))
        icon_lbl.setStyleSheet(STEP_COLORS.get(status, ""))
        detail_lbl.setText(detail)
        frame.setStyleSheet(f"padding: 1px 4px; {STEP_BG_COLORS.get(status, '')}")

        if status == "running":
            timer = QElapsedTimer()
            timer.start()
            self._step_timers[step_name] = timer
            time_lbl.setText("")
        elif status in ("done", "error"):
            timer = self._step_timers.pop(step_name, None)
            if timer:
                elapsed_ms = timer.elapsed()
                if elapsed_ms >= 1000:
                    time_lbl.setText(f"{elapsed_ms / 1000:.1f}s")
                else:
                    time_lbl.setText(f"{elapsed_ms}ms")
        else:
            time_lbl.setText("")

    def _on_notice(self, message: str):
        self.notice_label.setText(message)
        self.notice_label.show()

    def _on_record_added(self, title: str, poster: str, date: str, moved: bool):
        row = self.results_table.rowCount()
        self.results_table.insertRow(row)
        self.results_table.setItem(row, 0, QTableWidgetItem(title))
        self.results_table.setItem(row, 1, QTableWidgetItem(poster or "—"))
        self.results_table.setItem(row, 2, QTableWidgetItem(date))

        brush = QBrush(ROW_COLOR_MOVED if moved else ROW_COLOR_NEUTRAL)
        for col in range(self.results_table.columnCount()):
            item = self.results_table.item(row, col)
            if item:
                item.setBackground(brush)

        self.results_section.show()
        self.results_header.setText(f"Added to grid    {row + 1} movie(s)")

    def _on_done(self, status: str, added: int, moved: int):
        self._restore_stdout()

        if status == SyncStatus.SYNCED.value:
            self.progress_header.setText(f"✓ Done: {added} added, {moved} posters moved")
            self.progress_header.setStyleSheet("font-weight: bold; font-size: 13px; color: #4CAF50;")
            if moved:
                self.open_posters_btn.show()
        elif status == SyncStatus.UP_TO_DATE.value:
            self.progress_header.setText("✓ Grid already up to date")
            self.progress_header.setStyleSheet("font-weight: bold; font-size: 13px; color: #4CAF50;")
        else:
            self.progress_header.setText("✗ Nothing synced")
            self.progress_header.setStyleSheet("font-weight: bold; font-size: 13px; color: #F44336;")

        self.btn_action.setEnabled(True)

    def _on_error(self, msg: str):
        self._restore_stdout()
        self.progress_section.show()
        self.progress_header.setText(f"✗ Error: {msg}")
        self.progress_header.setStyleSheet("font-weight: bold; font-size: 13px; color: #F44336;")
        self.btn_action.setEnabled(True)
        # Auto-open log dialog so the user can see the full traceback
        if not self._details_dialog.isVisible():
            self._details_dialog.show()

    # -- open folder --------------------------------------------------------

    def _open_folder(self, path: str):
        try:
            win_path = subprocess.check_output(
                ["wslpath", "-w", path], text=True,
            ).strip()
            subprocess.Popen(["explorer.exe", win_path])
        except Exception:
            QDesktopServices.openUrl(QUrl.fromLocalFile(path))

    def _open_posters_folder(self):
        if self._vault_root:
            root = find_vault_root(Path(self._vault_root))
            self._open_folder(str(root / self._posters_dir))

    # -- details panel ------------------------------------------------------

    def _toggle_details(self):
        if self._details_dialog.isVisible():
            self._details_dialog.hide()
        else:
            self._details_dialog.show()
            self._details_dialog.raise_()

    def _copy_details(self):
        text = self.details_area.toPlainText()
        if text:
            QApplication.clipboard().setText(text)
            self.copy_details_btn.setText("Copied!")
            QTimer.singleShot(1500, lambda: self.copy_details_btn.setText("Copy All"))

    def _append_details(self, text: str):
        self.details_area.moveCursor(QTextCursor.MoveOperation.End)
        self.details_area.insertPlainText(text)
        self.details_area.moveCursor(QTextCursor.MoveOperation.End)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
