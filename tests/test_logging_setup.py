import logging
from pathlib import Path

from svg_ns_normalizer.logging_setup import setup_logging


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "app.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug", log_path=log_path)
        assert root.level == logging.DEBUG
        logging.getLogger("svg_ns_normalizer.test").info("normalized svg_hash=%s", "abc")
        for handler in root.handlers:
            handler.flush()
        assert "INFO svg_ns_normalizer.test normalized svg_hash=abc" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)


def test_setup_logging_unknown_level_falls_back_to_info() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("chatty")
        assert root.level == logging.INFO
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
