"""Integration tests for the git-utime command line."""

import pytest
from typer.testing import CliRunner

from git_utime import __version__
from git_utime.cli import app, merge_switches
from git_utime.constants import CONFIG_FILE
from git_utime.core import DiffMode
from tests.fixtures.git_project import requires_git


# ========== Fixtures ==========

@pytest.fixture
def runner():
    """Create a CliRunner for in-process testing."""
    return CliRunner()


@pytest.fixture
def captured(tmp_path, monkeypatch):
    """Replace the worktree lookup and the run itself; collect the configs passed."""
    configs = []

    def fake_utime_all(root, config, repo=None):
        configs.append(config)
        return 0

    monkeypatch.setattr("git_utime.cli.get_worktree_root", lambda path, repo=None: tmp_path)
    monkeypatch.setattr("git_utime.cli.utime_all", fake_utime_all)
    return configs


# ========== Option handling ==========

def test_version(runner):
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"git-utime {__version__}" in result.output


@pytest.mark.parametrize("args,expected", [
    ([], DiffMode.DEFAULT),
    (["-c"], DiffMode.COMBINED),
    (["-m"], DiffMode.PER_PARENT),
    (["-c", "-m"], DiffMode.PER_PARENT),
    (["-m", "-c"], DiffMode.COMBINED),
    (["-c", "--no-combined"], DiffMode.DEFAULT),
    (["-m", "--no-combined"], DiffMode.PER_PARENT),
    (["--combined", "--per-parent", "--no-per-parent"], DiffMode.DEFAULT),
    (["-c", "-m", "-c"], DiffMode.COMBINED),
    (["-m", "-c", "-m"], DiffMode.PER_PARENT),
    (["-cm"], DiffMode.PER_PARENT),
    (["-mc", "--no-combined"], DiffMode.DEFAULT),
])
def test_merge_switches_apply_in_order(runner, captured, args, expected):
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    assert captured[0].diff_mode is expected
    assert captured[0].recurse is False


def test_flags_override_config_file(runner, captured, tmp_path):
    (tmp_path / CONFIG_FILE).write_text("diff_merges: per-parent\n")

    runner.invoke(app, [])
    runner.invoke(app, ["--no-per-parent"])
    runner.invoke(app, ["-c", "-r"])

    assert [c.diff_mode for c in captured] == [
        DiffMode.PER_PARENT,
        DiffMode.DEFAULT,
        DiffMode.COMBINED,
    ]
    assert captured[2].recurse is True


def test_no_recurse_overrides_config_file(runner, captured, tmp_path):
    (tmp_path / CONFIG_FILE).write_text("recurse: true\n")

    runner.invoke(app, [])
    runner.invoke(app, ["--no-recurse"])
    runner.invoke(app, ["-r"])

    assert [c.recurse for c in captured] == [True, False, True]


def test_merge_switch_scan():
    assert merge_switches(["-v", "--per-parent", "-rc", "path"]) == [
        (DiffMode.PER_PARENT, True),
        (DiffMode.COMBINED, True),
    ]
    assert merge_switches(["--no-combined", "--no-per-parent"]) == [
        (DiffMode.COMBINED, False),
        (DiffMode.PER_PARENT, False),
    ]
    # Everything after "--" is positional
    assert merge_switches(["-c", "--", "-m"]) == [(DiffMode.COMBINED, True)]
    assert merge_switches(["--recurse", "-", "plain"]) == []


def test_merge_switches_after_separator_are_paths(runner, captured):
    result = runner.invoke(app, ["-m", "--", "-c"])
    assert result.exit_code == 0, result.output
    assert captured[0].diff_mode is DiffMode.PER_PARENT


def test_invalid_config_is_reported(runner, captured, tmp_path):
    (tmp_path / CONFIG_FILE).write_text("diff_merges: sideways\n")

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "error:" in result.output
    assert "sideways" in result.output
    assert captured == []


# ========== Real runs ==========

@requires_git
def test_outside_repository(runner, tmp_path, git_env):
    plain = tmp_path / "plain"
    plain.mkdir()

    result = runner.invoke(app, [str(plain)])

    assert result.exit_code == 128
    assert "error:" in result.output
    assert "not a git repository" in result.output


@requires_git
def test_restores_times(runner, make_project):
    project = make_project()
    project.write("sub/file")
    project.commit("2021-07-07T12:00:00")
    project.set_mtime("sub/file", "2021-07-07T23:59:59")

    result = runner.invoke(app, [str(project.path("sub"))])

    assert result.exit_code == 0, result.output
    assert "utime: 100% (1/1)" in result.output
    assert project.mtime("sub/file") == "2021-07-07T12:00:00"
    assert project.mtime("sub") == "2021-07-07T12:00:00"
    assert project.mtime() == "2021-07-07T12:00:00"


@requires_git
def test_verbose_logs_git_commands(runner, make_project, caplog):
    project = make_project()
    project.write("file")
    project.commit("2021-07-07T12:00:00")

    with caplog.at_level("DEBUG", logger="git_utime"):
        result = runner.invoke(app, ["-v", str(project.root)])

    assert result.exit_code == 0, result.output
    assert "ls-files" in caplog.text
