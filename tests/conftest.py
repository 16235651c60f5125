# Pytest configuration: add parent directory to path so modules can be imported.
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(autouse=True)
def isolate_ai_config(monkeypatch):
    """Keep a developer's real AI endpoint settings out of the tests."""
    import config

    monkeypatch.setattr(config, "_get_secrets", lambda: {})
    for name in ("AI_API_URL", "AI_API_KEY", "AI_MODEL"):
        monkeypatch.delenv(name, raising=False)
