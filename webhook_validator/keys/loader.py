"""Secret key file resolution and loading."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any

from webhook_validator.models.keys import (
    DEFAULT_KEY_LABEL,
    SECRET_KEY_FILE_FIELD,
    KeyDictionary,
    KeyEntry,
    KeyFileEntry,
    freeze_key_dictionary,
)
from webhook_validator.utils.logging import get_logger
from webhook_validator.webhook.labels import parse_key_label_from_config

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from webhook_validator.webhook.labels import ConfigLabelParser

logger = get_logger("keys.loader")


class FileReadError(Exception):
    """Raised when a secret key file cannot be read."""

    def __init__(self, path: str, error: OSError | UnicodeDecodeError) -> None:
        self.path = path
        reason = getattr(error, "strerror", None) or error
        super().__init__(f"{path}: {reason}")


def get_key_files(
    default_key_file: str | None = None,
    builder_configs: Sequence[Mapping[str, Any]] | None = None,
    parse_key_label_from_config_fn: ConfigLabelParser | None = None,
) -> list[KeyFileEntry]:
    """List the key files to load, in the order they are applied.

    Builders that name a secret key file come first, in config order. The
    default key file, if any, comes last under the reserved default label.

    Args:
        default_key_file: Path to the default secret key file.
        builder_configs: Per-branch builder configs.
        parse_key_label_from_config_fn: Maps a builder config to its label.
            Defaults to reading the ``branch`` field.

    Returns:
        Key file entries in resolution order.
    """
    label_for = parse_key_label_from_config_fn or parse_key_label_from_config

    files = [
        KeyFileEntry(label=label_for(config), file=config[SECRET_KEY_FILE_FIELD])
        for config in builder_configs or []
        if config.get(SECRET_KEY_FILE_FIELD)
    ]

    if default_key_file:
        files.append(KeyFileEntry(label=DEFAULT_KEY_LABEL, file=default_key_file))

    return files


def load_key_file(key_label: str | None, key_file: str) -> KeyEntry:
    """Load a single secret key, trimmed of surrounding whitespace.

    Args:
        key_label: Label the key is stored under.
        key_file: Path to the key file.

    Returns:
        The loaded key entry.

    Raises:
        FileReadError: If the file is missing or unreadable.
    """
    try:
        secret_key = Path(key_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(key_file, e) from e

    logger.debug("Loaded key file", extra={"label": key_label, "file": key_file})
    return KeyEntry(label=key_label, key=secret_key.strip())


def load_key_dictionary(
    default_key_file: str | None = None,
    builder_configs: Sequence[Mapping[str, Any]] | None = None,
    parse_key_label_from_config_fn: ConfigLabelParser | None = None,
) -> KeyDictionary:
    """Load every configured key file into a label -> secret dictionary.

    Files are read one at a time in resolution order and the first failure
    aborts the load. When two files share a label the later one wins.

    Args:
        default_key_file: Path to the default secret key file.
        builder_configs: Per-branch builder configs.
        parse_key_label_from_config_fn: Maps a builder config to its label.

    Returns:
        Read-only key dictionary.

    Raises:
        FileReadError: If any key file cannot be read.
    """
    key_files = get_key_files(default_key_file, builder_configs, parse_key_label_from_config_fn)
    entries = [load_key_file(item.label, item.file) for item in key_files]
    return _finish(entries)


async def load_key_dictionary_async(
    default_key_file: str | None = None,
    builder_configs: Sequence[Mapping[str, Any]] | None = None,
    parse_key_label_from_config_fn: ConfigLabelParser | None = None,
) -> KeyDictionary:
    """Async variant of :func:`load_key_dictionary` reading files concurrently.

    Results are merged in resolution order, so the outcome matches the
    sequential loader. If several reads fail, the error of the earliest
    entry in resolution order is raised.

    Raises:
        FileReadError: If any key file cannot be read.
    """
    key_files = get_key_files(default_key_file, builder_configs, parse_key_label_from_config_fn)
    results = await asyncio.gather(
        *(asyncio.to_thread(load_key_file, item.label, item.file) for item in key_files),
        return_exceptions=True,
    )

    entries: list[KeyEntry] = []
    for result in results:
        if isinstance(result, BaseException):
            raise result
        entries.append(result)

    return _finish(entries)


def _finish(entries: list[KeyEntry]) -> KeyDictionary:
    dictionary = freeze_key_dictionary(entries)
    logger.info(
        "Loaded key dictionary",
        extra={"labels": list(dictionary), "key_files": len(entries)},
    )
    return dictionary
