from pathlib import Path
from typing import Any

import pytest

from svg_ns_normalizer import main as cli
from svg_ns_normalizer.config import CONFIG_ENV_VAR
from svg_ns_normalizer.loaders import SvgFetchError

XLINK = "http://www.w3.org/1999/xlink"
BROKEN = f'<svg xmlns:ns1="{XLINK}"><image ns1:href="a.png"/></svg>'
FIXED = f'<svg xmlns:xlink="{XLINK}"><image xlink:href="a.png"/></svg>'


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "config.json"))
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_check_reports_broken_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    broken = _write(tmp_path, "broken.svg", BROKEN)
    clean = _write(tmp_path, "clean.svg", FIXED)
    assert cli.main(["check", str(broken), str(clean)]) == 1
    assert capsys.readouterr().out.splitlines() == [str(broken)]

    assert cli.main(["check", str(clean)]) == 0


def test_fix_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    broken = _write(tmp_path, "broken.svg", BROKEN)
    assert cli.main(["fix", str(broken)]) == 0
    assert capsys.readouterr().out == FIXED
    assert broken.read_text(encoding="utf-8") == BROKEN


def test_fix_in_place_and_output(tmp_path: Path) -> None:
    broken = _write(tmp_path, "broken.svg", BROKEN)
    out = tmp_path / "out.svg"
    assert cli.main(["fix", str(broken), "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == FIXED

    assert cli.main(["fix", "--in-place", str(broken)]) == 0
    assert broken.read_text(encoding="utf-8") == FIXED


def test_fix_rejects_output_with_several_inputs(tmp_path: Path) -> None:
    a = _write(tmp_path, "a.svg", BROKEN)
    b = _write(tmp_path, "b.svg", BROKEN)
    assert cli.main(["fix", str(a), str(b), "-o", str(tmp_path / "out.svg")]) == 2


def test_fix_strip_foreign_prefixes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "foreign.svg", '<svg><ns0:rect ns0:width="1"/></svg>')
    assert cli.main(["fix", "--strip-foreign-prefixes", str(path)]) == 0
    assert capsys.readouterr().out == '<svg xmlns="http://www.w3.org/2000/svg"><rect width="1"/></svg>'


def test_fetch_command(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    seen: dict[str, Any] = {}

    def fake_fetch(url: str, **kwargs: Any) -> str:
        seen["url"] = url
        seen.update(kwargs)
        return FIXED

    monkeypatch.setattr(cli, "fetch_and_normalize", fake_fetch)
    assert cli.main(["fetch", "https://example.com/a.svg", "--timeout", "3"]) == 0
    assert capsys.readouterr().out == FIXED
    assert seen == {"url": "https://example.com/a.svg", "timeout": 3.0}


def test_fetch_command_reports_errors(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def failing_fetch(url: str, **kwargs: Any) -> str:
        raise SvgFetchError("Failed to fetch SVG: 503", status_code=503, url=url)

    monkeypatch.setattr(cli, "fetch_and_normalize", failing_fetch)
    assert cli.main(["fetch", "https://example.com/a.svg"]) == 1
    assert "503" in capsys.readouterr().err


def test_data_url_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "broken.svg", BROKEN)
    assert cli.main(["data-url", str(path)]) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("data:image/svg+xml,%3Csvg%20xmlns%3Axlink")


@pytest.mark.parametrize("command", ["check", "fix", "data-url"])
def test_unreadable_input_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str], command: str) -> None:
    missing = tmp_path / "missing.svg"
    assert cli.main([command, str(missing)]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith(f"error: {missing}: ")


def test_non_utf8_input_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "latin1.svg"
    path.write_bytes(b"<svg>\xff</svg>")
    assert cli.main(["check", str(path)]) == 2
    assert "latin1.svg" in capsys.readouterr().err
