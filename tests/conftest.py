import random

import pytest

from tests.factories import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and the default progress path
    monkeypatch.setenv("HOME", str(home))
    for var in ("RETENTA_LANGUAGE", "RETENTA_PROGRESS_PATH", "RETENTA_SEED", "RETENTA_TIMEZONE"):
        monkeypatch.delenv(var, raising=False)
    return home
