"""Tests for hookforge CLI commands."""

import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from hookforge.cli.main import cli


MANIFEST = """\
hooks:
  build:
    kind: SyncHook
    args: [compilation, stats]
  emit:
    kind: AsyncParallelHook
    args: [assets]
taps:
  - hook: build
    name: banner
    callback: os:getcwd
  - hook: build
    name: cleanup
    callback: os:getcwd
    stage: -5
  - hook: build
    name: preflight
    callback: os:getcwd
    before: [banner]
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("HOOKFORGE_MANIFEST", raising=False)
    monkeypatch.delenv("HOOKFORGE_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI installs a stderr handler bound to the runner's stream."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = logging.getLogger("hookforge").level
    yield
    root.handlers[:] = handlers
    logging.getLogger("hookforge").setLevel(level)


@pytest.fixture
def manifest(tmp_path) -> Path:
    path = tmp_path / "hookforge.yaml"
    path.write_text(MANIFEST)
    return path


class TestKinds:
    def test_lists_every_kind(self, runner):
        result = runner.invoke(cli, ["kinds"])
        assert result.exit_code == 0
        assert "SyncWaterfallHook" in result.output
        assert "AsyncParallelBailHook" in result.output

    def test_shows_mode(self, runner):
        result = runner.invoke(cli, ["kinds"])
        lines = {line.split()[0]: line.split()[1] for line in result.output.splitlines()}
        assert lines["SyncLoopHook"] == "sync"
        assert lines["AsyncSeriesHook"] == "async"

    def test_invalid_log_level(self, runner):
        result = runner.invoke(cli, ["--log-level", "chatty", "kinds"])
        assert result.exit_code != 0
        assert "Unknown log level" in result.output


class TestValidate:
    def test_valid_manifest(self, runner, manifest):
        result = runner.invoke(cli, ["validate", str(manifest)])
        assert result.exit_code == 0
        assert "Manifest is valid." in result.output

    def test_uses_configured_manifest(self, runner, manifest, monkeypatch):
        monkeypatch.setenv("HOOKFORGE_MANIFEST", str(manifest))
        result = runner.invoke(cli, ["validate"])
        assert result.exit_code == 0

    def test_missing_default_manifest(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["validate"])
        assert result.exit_code == 1
        assert "Manifest not found" in result.output

    def test_reports_errors(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("hooks:\n  h:\n    kind: NotAHook\n")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "hooks/h/kind" in result.output
        assert "1 error(s) found" in result.output

    def test_warnings_pass_unless_strict(self, runner, tmp_path):
        path = tmp_path / "dup.yaml"
        path.write_text(
            "hooks:\n  h:\n    kind: SyncHook\n"
            "taps:\n"
            "  - {hook: h, name: t, callback: 'os:getcwd'}\n"
            "  - {hook: h, name: t, callback: 'os:getcwd'}\n"
        )
        relaxed = runner.invoke(cli, ["validate", str(path)])
        assert relaxed.exit_code == 0
        assert "1 warning(s) found." in relaxed.output

        strict = runner.invoke(cli, ["validate", "--strict", str(path)])
        assert strict.exit_code == 1


class TestTaps:
    def test_prints_resolved_order(self, runner, manifest):
        result = runner.invoke(cli, ["taps", str(manifest)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "build (SyncHook: compilation, stats)"
        assert lines[1] == "  1. cleanup [sync] stage -5"
        assert lines[2] == "  2. preflight [sync] stage 0 before banner"
        assert lines[3] == "  3. banner [sync] stage 0"
        assert lines[4] == "emit (AsyncParallelHook: assets)"
        assert lines[5] == "  (no taps)"

    def test_single_hook(self, runner, manifest):
        result = runner.invoke(cli, ["taps", str(manifest), "--hook", "emit"])
        assert result.exit_code == 0
        assert "build" not in result.output

    def test_unknown_hook(self, runner, manifest):
        result = runner.invoke(cli, ["taps", str(manifest), "--hook", "missing"])
        assert result.exit_code == 1
        assert "not declared" in result.output

    def test_load_failure(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("hooks:\n  h:\n    kind: SyncHook\ntaps:\n  - {hook: h, name: a, callback: 'os:nope'}\n")
        result = runner.invoke(cli, ["taps", str(path)])
        assert result.exit_code == 1
        assert "Failed to load manifest" in result.output
