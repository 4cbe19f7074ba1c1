"""Clipboard listener that repairs copied SVG documents in place."""

from __future__ import annotations

import logging

from PySide6.QtCore import QMimeData, QObject, QTimer, Signal
from PySide6.QtGui import QClipboard, QGuiApplication

from svg_ns_normalizer.clipboard.repair import ClipboardRepair, repair_clipboard_text
from svg_ns_normalizer.config import AppConfig
from svg_ns_normalizer.normalize.normalizer import SvgNormalizer, svg_hash

_log = logging.getLogger("svg_ns_normalizer.clipboard")


class ClipboardWatcher(QObject):
    """Debounces clipboard changes and writes repaired SVG text back.

    The clipboard is read once the debounce timer fires, so a burst of change
    events costs one repair of whatever text is on the clipboard at the end.
    """

    repaired = Signal(object)  # ClipboardRepair, written back to the clipboard
    unchanged = Signal(object)  # ClipboardRepair, nothing to write
    failed = Signal(str)
    listening_changed = Signal(bool)

    def __init__(
        self,
        normalizer: SvgNormalizer,
        config: AppConfig,
        clipboard: QClipboard | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._normalizer = normalizer
        self._cfg = config
        self._clipboard = clipboard or QGuiApplication.clipboard()

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._repair_current)

        self._listening = False
        # Hash of the text this watcher last put on the clipboard.
        self._written_hash: str | None = None

    @property
    def listening(self) -> bool:
        return self._listening

    def set_config(self, config: AppConfig) -> None:
        self._cfg = config
        self._normalizer.set_config(config)

    def set_listening(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._listening:
            return
        self._listening = enabled
        if enabled:
            self._clipboard.dataChanged.connect(self._on_data_changed)
        else:
            self._clipboard.dataChanged.disconnect(self._on_data_changed)
            self._timer.stop()
        _log.info("listening=%s", enabled)
        self.listening_changed.emit(enabled)

    def _on_data_changed(self) -> None:
        self._timer.start(max(0, int(self._cfg.debounce_ms)))

    def _copied_text(self) -> str | None:
        mime = self._clipboard.mimeData()
        if mime is None or mime.hasImage() or not mime.hasText():
            return None
        return mime.text() or None

    def _repair_current(self) -> None:
        if not self._listening:
            return
        text = self._copied_text()
        if text is None:
            return
        if self._written_hash is not None and svg_hash(text) == self._written_hash:
            return

        try:
            repair = repair_clipboard_text(text, self._normalizer.normalize, max_chars=int(self._cfg.max_svg_chars))
        except Exception as e:
            _log.exception("clipboard_repair_failed chars=%d", len(text))
            self.failed.emit(str(e))
            return
        if repair is None:
            return

        if not repair.changed:
            self.unchanged.emit(repair)
            return
        self._write_back(repair)

    def _write_back(self, repair: ClipboardRepair) -> None:
        self._written_hash = svg_hash(repair.text)
        mime = QMimeData()
        mime.setText(repair.text)
        self._clipboard.setMimeData(mime)
        _log.info(
            "clipboard_repaired svg_hash=%s chars=%d ms=%.1f",
            repair.markup.svg_hash[:10],
            len(repair.text),
            repair.markup.elapsed_ms,
        )
        self.repaired.emit(repair)
