"""Shared pytest fixtures for the batch sender test-suite."""
from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import config
import sender_logging

SENDER = "terra1sender0000000000000000000000000000000"
MNEMONIC = " ".join(["abandon"] * 23 + ["art"])


@pytest.fixture(scope="session", autouse=True)
def test_environment() -> Iterator[None]:
    """Ensure tests run with the dedicated 'test' configuration and logging."""
    original_env = os.environ.get("BATCH_ENV")
    os.environ["BATCH_ENV"] = "test"

    config.reload_settings(env="test")
    sender_logging.configure(config.LOGGING)

    yield

    if original_env is None:
        os.environ.pop("BATCH_ENV", None)
        config.reload_settings(env="development")
    else:
        os.environ["BATCH_ENV"] = original_env
        config.reload_settings(env=original_env)


@pytest.fixture()
def transfer_settings() -> config.TransferSettings:
    return config.load_settings(env="test").transfer


@pytest.fixture()
def test_settings(tmp_path) -> config.Settings:
    """Test settings whose result sheets land in a temporary directory."""
    return config.load_settings(env="test", overrides={"output": {"directory": str(tmp_path)}})
