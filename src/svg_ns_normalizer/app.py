"""Desktop entrypoint for `svg-ns-normalizer watch`."""

from __future__ import annotations

import logging

from PySide6.QtCore import QLockFile
from PySide6.QtWidgets import QApplication, QMessageBox

from svg_ns_normalizer.clipboard.watcher import ClipboardWatcher
from svg_ns_normalizer.config import AppConfig, get_config_path
from svg_ns_normalizer.logging_setup import setup_logging
from svg_ns_normalizer.normalize.normalizer import SvgNormalizer
from svg_ns_normalizer.ui.main_window import MainWindow

APP_TITLE = "SVG Namespace Normalizer"

_log = logging.getLogger("svg_ns_normalizer")


def _connect(window: MainWindow, watcher: ClipboardWatcher, config: AppConfig, app: QApplication) -> None:
    def on_listen(enabled: bool) -> None:
        config.listen_enabled = bool(enabled)
        config.save()
        watcher.set_listening(enabled)

    def on_strip(enabled: bool) -> None:
        config.strip_foreign_prefixes = bool(enabled)
        config.save()
        watcher.set_config(config)
        _log.info("strip_foreign_prefixes=%s", enabled)

    window.listen_toggled.connect(on_listen)
    window.strip_foreign_toggled.connect(on_strip)
    window.exit_requested.connect(app.quit)
    watcher.listening_changed.connect(window.set_listening)
    watcher.repaired.connect(window.show_repaired)
    watcher.unchanged.connect(window.show_unchanged)
    watcher.failed.connect(window.show_error)


def run_app() -> None:
    config = AppConfig.load()
    config_dir = get_config_path().parent
    setup_logging(config.log_level, log_path=config_dir / "app.log")

    app = QApplication([])
    app.setApplicationName(APP_TITLE)

    lock = QLockFile(str(config_dir / "instance.lock"))
    lock.setStaleLockTime(10_000)
    if not lock.tryLock(0) and not (lock.removeStaleLockFile() and lock.tryLock(0)):
        QMessageBox.information(None, APP_TITLE, f"{APP_TITLE} is already running.")
        raise SystemExit(0)

    _log.info(
        "app_start listen=%s debounce_ms=%s strip=%s",
        config.listen_enabled,
        config.debounce_ms,
        config.strip_foreign_prefixes,
    )
    watcher = ClipboardWatcher(SvgNormalizer(config), config, parent=app)
    window = MainWindow(APP_TITLE)
    window.set_strip_foreign(bool(config.strip_foreign_prefixes))
    _connect(window, watcher, config, app)

    window.set_listening(bool(config.listen_enabled))
    watcher.set_listening(bool(config.listen_enabled))
    window.show()
    raise SystemExit(app.exec())
