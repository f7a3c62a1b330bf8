"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import hashlib
import hmac
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Generator
    from pathlib import Path


@dataclass
class KeyFiles:
    """Paths of the secret key files written for a test."""

    default: str
    secrets: list[str]


@pytest.fixture(autouse=True)
def reset_env() -> Generator[None]:
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def key_files(tmp_path: Path) -> KeyFiles:
    """Secret key files with surrounding whitespace to be trimmed."""
    contents = {
        "defaultKey": "default secret\n",
        "secret0": "deadbeef\n",
        "secret1": "  feedbead\n\n",
        "secret2": "secret the third\n",
    }
    for name, content in contents.items():
        (tmp_path / name).write_text(content, encoding="utf-8")

    return KeyFiles(
        default=str(tmp_path / "defaultKey"),
        secrets=[str(tmp_path / name) for name in ("secret0", "secret1", "secret2")],
    )


@pytest.fixture
def make_signature() -> Callable[[bytes | str, str], str]:
    """Build an ``X-Hub-Signature`` value the way GitHub does."""

    def _make_signature(payload: bytes | str, secret: str) -> str:
        body = payload.encode("utf-8") if isinstance(payload, str) else payload
        return "sha1=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha1).hexdigest()

    return _make_signature


@pytest.fixture
def branch_payload() -> bytes:
    """Push payload for the 18f-pages branch."""
    return b'{ "ref": "refs/heads/18f-pages" }'
