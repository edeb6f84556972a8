from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from quire.core.config import ViewerSettings, load_settings, save_settings
from quire.core.constants import EvictionPolicy


@pytest.fixture()
def store(tmp_path: Path) -> QSettings:
    return QSettings(str(tmp_path / "quire.ini"), QSettings.Format.IniFormat)


def test_defaults_when_store_is_empty(store) -> None:
    settings = load_settings(store)

    assert settings.cache_capacity == 10
    assert settings.eviction is EvictionPolicy.FIFO
    assert settings.dark_mode is True
    assert settings.last_directory == ""
    assert settings.recent_files == []


def test_settings_round_trip(tmp_path: Path, store) -> None:
    settings = ViewerSettings(
        cache_capacity=25,
        eviction=EvictionPolicy.LRU,
        dark_mode=False,
        last_directory="/home/reader/papers",
        recent_files=["/home/reader/papers/a.pdf", "/home/reader/papers/b.pdf"],
    )

    save_settings(settings, store)
    reread = QSettings(str(tmp_path / "quire.ini"), QSettings.Format.IniFormat)

    assert load_settings(reread) == settings


def test_invalid_values_fall_back_to_defaults(store) -> None:
    store.setValue("cacheCapacity", "lots")
    store.setValue("eviction", "random")

    settings = load_settings(store)

    assert settings.cache_capacity == 10
    assert settings.eviction is EvictionPolicy.FIFO


def test_non_positive_capacity_is_rejected(store) -> None:
    store.setValue("cacheCapacity", 0)

    assert load_settings(store).cache_capacity == 10


def test_remember_file_moves_path_to_front_and_caps_list() -> None:
    settings = ViewerSettings()
    for i in range(12):
        settings.remember_file(f"/docs/{i}.pdf")

    settings.remember_file("/docs/5.pdf")

    assert settings.recent_files[0] == "/docs/5.pdf"
    assert len(settings.recent_files) == 10
    assert settings.recent_files.count("/docs/5.pdf") == 1
    assert "/docs/0.pdf" not in settings.recent_files


def test_remember_file_ignores_empty_path() -> None:
    settings = ViewerSettings()

    settings.remember_file("")

    assert settings.recent_files == []
