"""Root conftest: applies .env.test before chat_sync.config builds its settings."""
from __future__ import annotations

import os
from pathlib import Path

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for line in _env_test.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ[key.strip()] = value.strip()

# Identity must come from the tests, never from the developer's shell.
for _key in ("CHAT_USER_ID", "CHAT_USER_TYPE", "CHAT_PREFERRED_NAME", "CHAT_FIRST_NAME", "CHAT_LAST_NAME"):
    os.environ.pop(_key, None)
