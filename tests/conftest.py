"""Shared test fixtures and utilities."""

import pytest

from tests.fixtures.fakes import RecordingSetter
from tests.fixtures.git_project import GitProject


@pytest.fixture
def git_env(tmp_path, monkeypatch):
    """Isolate git from the user's configuration and allow local submodule URLs."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))  # Windows
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.setenv("GIT_CONFIG_COUNT", "1")
    monkeypatch.setenv("GIT_CONFIG_KEY_0", "protocol.file.allow")
    monkeypatch.setenv("GIT_CONFIG_VALUE_0", "always")
    for var in ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE", "GIT_UTIME_GIT"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def make_project(tmp_path, git_env):
    """Factory fixture creating initialized git repositories under tmp_path."""
    def _make(name: str = "repo") -> GitProject:
        return GitProject(tmp_path / name).init()
    return _make


@pytest.fixture
def recording_setter():
    return RecordingSetter()
