import pytest

from prototyper.test_utils import SpyBus, WorkspaceFactory


@pytest.fixture
def workspace_factory(tmp_path, monkeypatch):
    # Commands resolve the project from the working directory
    monkeypatch.chdir(tmp_path)
    return WorkspaceFactory(tmp_path)


@pytest.fixture
def spy_bus(monkeypatch):
    spy = SpyBus()
    with spy.patch(monkeypatch):
        yield spy
