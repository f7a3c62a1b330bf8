"""Secret key loading."""

from webhook_validator.keys.loader import (
    FileReadError,
    get_key_files,
    load_key_dictionary,
    load_key_dictionary_async,
    load_key_file,
)

__all__ = [
    "FileReadError",
    "get_key_files",
    "load_key_dictionary",
    "load_key_dictionary_async",
    "load_key_file",
]
