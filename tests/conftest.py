from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from cgfees.config import CONFIG_FILE_ENV, Settings


@pytest.fixture(autouse=True)
def isolate_settings_from_host_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    original_env_file = Settings.model_config.get("env_file")
    Settings.model_config["env_file"] = None

    settings_env_keys: set[str] = {"HTTPX_LOG_LEVEL", "HTTPCORE_LOG_LEVEL"}
    for field in Settings.model_fields.values():
        if isinstance(field.alias, str):
            settings_env_keys.add(field.alias)

    for key in list(os.environ):
        if key.upper() in settings_env_keys:
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "missing-config.toml"))

    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level

    yield

    Settings.model_config["env_file"] = original_env_file
    root.handlers[:] = original_handlers
    root.setLevel(original_level)
