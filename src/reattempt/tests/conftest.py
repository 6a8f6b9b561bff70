"""Shared fixtures."""

import pytest

from reattempt import clear_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Keep REATTEMPT_* variables from the host out of every test."""
    import os
    
    for key in [k for k in os.environ if k.startswith("REATTEMPT_")]:
        monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()
