"""Small control window for the clipboard watcher."""

from __future__ import annotations

from PySide6.QtCore import QSignalBlocker, Signal
from PySide6.QtWidgets import QCheckBox, QDialogButtonBox, QFormLayout, QLabel, QMainWindow, QWidget

from svg_ns_normalizer.clipboard.repair import ClipboardRepair


class MainWindow(QMainWindow):
    listen_toggled = Signal(bool)
    strip_foreign_toggled = Signal(bool)
    exit_requested = Signal()

    def __init__(self, title: str) -> None:
        super().__init__()
        self.setWindowTitle(title)
        self._fixed_count = 0

        self._listen_box = QCheckBox("Repair SVG copied to the clipboard")
        self._listen_box.toggled.connect(self.listen_toggled)
        self._strip_box = QCheckBox("Also strip numbered prefixes bound to other namespaces")
        self._strip_box.toggled.connect(self.strip_foreign_toggled)

        self._last = QLabel("-")
        self._last.setWordWrap(True)
        self._count = QLabel("0")

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.exit_requested)

        form = QFormLayout()
        form.addRow(self._listen_box)
        form.addRow(self._strip_box)
        form.addRow("Last copy:", self._last)
        form.addRow("Documents fixed:", self._count)
        form.addRow(buttons)

        central = QWidget()
        central.setLayout(form)
        self.setCentralWidget(central)

    def set_listening(self, enabled: bool) -> None:
        with QSignalBlocker(self._listen_box):
            self._listen_box.setChecked(enabled)

    def set_strip_foreign(self, enabled: bool) -> None:
        with QSignalBlocker(self._strip_box):
            self._strip_box.setChecked(enabled)

    def show_repaired(self, repair: ClipboardRepair) -> None:
        self._fixed_count += 1
        self._count.setText(str(self._fixed_count))
        self._last.setText(f"Fixed {len(repair.text)} chars in {repair.markup.elapsed_ms:.0f} ms")

    def show_unchanged(self, repair: ClipboardRepair) -> None:
        self._last.setText("Numbered prefixes found, none bound to XLink")

    def show_error(self, message: str) -> None:
        self._last.setText(f"Error: {message}")
