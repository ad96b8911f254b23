"""Shared test fixtures for cove."""

import logging

import pytest

from cove.config import ContainersConfig
from cove.observable import ListObserver
from cove.store import ContainerConfigList


class RecordingObserver(ListObserver):
    """Observer that records every notification it receives."""

    def __init__(self):
        self.events = []

    def rows_about_to_be_inserted(self, source, first, last):
        self.events.append(("about_to_insert", first, last))

    def rows_inserted(self, source, first, last):
        self.events.append(("inserted", first, last))

    def rows_about_to_be_removed(self, source, first, last):
        self.events.append(("about_to_remove", first, last))

    def rows_removed(self, source, first, last):
        self.events.append(("removed", first, last))

    def about_to_reset(self, source):
        self.events.append(("about_to_reset",))

    def reset(self, source):
        self.events.append(("reset",))

    def data_changed(self, source, first, last, fields):
        self.events.append(("data_changed", first, last, fields))

    def config_changed(self, source):
        self.events.append(("config_changed",))


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def containers_file(tmp_path):
    return tmp_path / "ContainersConfig.json"


@pytest.fixture
def file_store(containers_file):
    """A store bound to a (not yet existing) file under tmp_path."""
    return ContainerConfigList(ContainersConfig(containers_file))


@pytest.fixture
def tmp_data_dir(tmp_path, monkeypatch):
    """Redirect all cove data paths to a temp directory."""
    import cove.config as config

    data_dir = tmp_path / "cove"
    data_dir.mkdir()

    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "CONFIG_FILE", data_dir / "config.toml")
    monkeypatch.setattr(config, "CONTAINERS_FILE", data_dir / "ContainersConfig.json")

    return data_dir


@pytest.fixture(autouse=True)
def reset_cove_logger():
    """Drop handlers the CLI attaches so they don't outlive the test."""
    yield
    logger = logging.getLogger("cove")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
