from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _clear_client_env(monkeypatch) -> None:
    monkeypatch.delenv("REST_CLIENT_BASE_URL", raising=False)
    monkeypatch.delenv("REST_CLIENT_TOKEN", raising=False)
