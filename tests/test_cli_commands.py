"""Tests for the longshot and longshot-batch command-line tools."""

from pathlib import Path

import pytest
from unittest.mock import AsyncMock

from longshot_core.cli import batch, capture
from longshot_core.exceptions import CaptureError
from longshot_core.models import CaptureResult


def test_capture_requires_url_and_output():
    with pytest.raises(SystemExit) as exc_info:
        capture.main(["--url", "https://example.com"])
    assert exc_info.value.code == 2


def test_capture_rejects_bad_boolean():
    with pytest.raises(SystemExit):
        capture.build_parser().parse_args(["--url", "u", "--output", "o", "--stitch", "maybe"])


def test_capture_settings_from_args():
    args = capture.build_parser().parse_args([
        "--url", "u", "--output", "o.png", "--width", "1280", "--stitch", "off",
        "--scroll-wait-ms", "50", "--user-data-dir", "/tmp/p",
    ])
    settings = capture.settings_from_args(args)
    assert settings.viewport_width == 1280
    assert settings.stitch is False
    assert settings.scroll_wait_ms == 50
    assert settings.user_data_dir == "/tmp/p"


def test_capture_success(monkeypatch, tmp_path, capsys):
    out = tmp_path / "shot.png"
    fake = AsyncMock(return_value=CaptureResult(path=out, mode="stitched", tile_count=3, width=10, height=30))
    monkeypatch.setattr(capture, "capture_url", fake)

    assert capture.main(["--url", "https://example.com", "--output", str(out)]) == 0
    assert fake.await_args.args[:2] == ("https://example.com", str(out))
    assert "stitched" in capsys.readouterr().out


def test_capture_failure_exit_code(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(capture, "capture_url", AsyncMock(side_effect=CaptureError("boom", offset=900)))
    assert capture.main(["--url", "u", "--output", str(tmp_path / "x.png")]) == 1
    assert "screenshot" in capsys.readouterr().err


def write_config(tmp_path) -> Path:
    path = tmp_path / "longshot.yaml"
    path.write_text(
        "defaults:\n"
        "  waitSeconds: 1\n"
        "targets:\n"
        "  - name: a\n"
        "    url: https://a\n"
        "  - name: b\n"
        "    url: https://b\n"
    )
    return path


def test_batch_overrides():
    args = batch.build_parser().parse_args(["--headful", "--wait", "2", "--stitch", "false"])
    overrides = batch.overrides_from_args(args)
    assert overrides["headless"] is False
    assert overrides["wait"] == 2
    assert overrides["stitch"] is False
    assert overrides["width"] is None


def test_batch_runs_selected_target(monkeypatch, tmp_path):
    config_path = write_config(tmp_path)
    fake = AsyncMock(side_effect=lambda url, path, settings: CaptureResult(path=path, mode="full_page", tile_count=1))
    monkeypatch.setattr("longshot_core.browser_setup.capture_url", fake)

    code = batch.main(["--config", str(config_path), "--target", "b", "--out-dir", str(tmp_path / "out")])

    assert code == 0
    assert [c.args[0] for c in fake.await_args_list] == ["https://b"]
    settings = fake.await_args.args[2]
    assert settings.wait_ms == 1000
    assert settings.headless is True


def test_batch_missing_config(tmp_path):
    assert batch.main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_batch_unknown_target(tmp_path):
    config_path = write_config(tmp_path)
    assert batch.main(["--config", str(config_path), "--target", "zzz"]) == 1


def test_batch_capture_failure(monkeypatch, tmp_path):
    config_path = write_config(tmp_path)
    monkeypatch.setattr(
        "longshot_core.browser_setup.capture_url",
        AsyncMock(side_effect=CaptureError("boom", offset=0)),
    )
    assert batch.main(["--config", str(config_path)]) == 1
