"""Key file and key dictionary models."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

# Label under which the default secret is stored
DEFAULT_KEY_LABEL = "<default>"

# Builder config field naming the per-branch secret file
SECRET_KEY_FILE_FIELD = "secret_key_file"

# A read-only label -> secret mapping
KeyDictionary = Mapping[str, str]


@dataclass(frozen=True)
class KeyFileEntry:
    """A secret key file to load and the label it is stored under."""

    label: str | None
    file: str


@dataclass(frozen=True)
class KeyEntry:
    """A loaded secret key."""

    label: str | None
    key: str

    def __repr__(self) -> str:
        return f"KeyEntry(label={self.label!r}, key='***')"


def freeze_key_dictionary(entries: list[KeyEntry]) -> KeyDictionary:
    """Merge loaded entries into a read-only key dictionary.

    Entries are applied in order, so a later entry replaces an earlier one
    with the same label. Entries without a label are skipped.

    Args:
        entries: Loaded key entries in resolution order.

    Returns:
        Read-only mapping of label to secret.
    """
    dictionary: dict[str, str] = {}
    for entry in entries:
        if entry.label:
            dictionary[entry.label] = entry.key
    return MappingProxyType(dictionary)
