"""Key label extraction from builder configs and webhook payloads."""

import re
from collections.abc import Callable, Mapping
from typing import Any

# Maps a raw request body to the label of the secret that signed it
KeyLabelParser = Callable[[bytes], str | None]

# Maps a builder config to the label its secret is stored under
ConfigLabelParser = Callable[[Mapping[str, Any]], str | None]

# Matched against the raw bytes so non-JSON payloads never raise
_BRANCH_REF_PATTERN = re.compile(rb'"ref": ?"refs/heads/([^"]*)"')


def parse_key_label_from_branch(raw_body: bytes) -> str | None:
    """Extract the pushed branch name from a payload's ``ref`` field.

    Args:
        raw_body: The raw request body bytes.

    Returns:
        The branch name, or None if the payload has no branch ref.
    """
    match = _BRANCH_REF_PATTERN.search(raw_body)
    if match is None:
        return None
    return match.group(1).decode("utf-8", errors="replace")


def parse_key_label_from_config(config: Mapping[str, Any]) -> str | None:
    """Read the label of a builder config from its ``branch`` field."""
    return config.get("branch")
