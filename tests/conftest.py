from __future__ import annotations

import os
from pathlib import Path

import pytest

from core.config import AppSettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Keep developer .env files and EC_BACKUP_* variables out of the tests.
    for key in list(os.environ):
        if key.upper().startswith("EC_BACKUP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def key_files(tmp_path) -> dict[str, Path]:
    pivotal = tmp_path / "pivotal.pem"
    webui = tmp_path / "webui_priv.pem"
    pivotal.write_text("fake-key")
    webui.write_text("fake-key")
    return {"pivotal": pivotal, "webui": webui}


@pytest.fixture
def make_settings(key_files):
    def _make(**overrides) -> AppSettings:
        values = {
            "chef_server_url": "https://chef.example.com/organizations/acme",
            "pivotal_key_path": key_files["pivotal"],
            "webui_key": key_files["webui"],
        }
        values.update(overrides)
        return AppSettings(_env_file=None, **values)

    return _make
