"""Front matter reading for markdown assets."""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(r"\A---\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

AGENT_FRONTMATTER_TOKENS = ("tools", "model")


def extract_frontmatter_block(content: str) -> str | None:
    """Return the raw text between the leading --- delimiters, or None."""
    match = FRONTMATTER_PATTERN.match(content)
    if match is None:
        return None
    return match.group(1)


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None


def has_agent_frontmatter(path: Path) -> bool:
    """Check whether a markdown file's header mentions agent fields (tools or model)."""
    content = _read_text(path)
    if content is None:
        return False

    block = extract_frontmatter_block(content)
    if block is None:
        return False

    lowered = block.lower()
    return any(token in lowered for token in AGENT_FRONTMATTER_TOKENS)


def read_frontmatter(path: Path) -> dict[str, Any]:
    """Parse a markdown file's YAML header.

    Returns an empty mapping when the file is unreadable, has no header, or the
    header is not a YAML mapping.
    """
    content = _read_text(path)
    if content is None:
        return {}

    block = extract_frontmatter_block(content)
    if block is None:
        return {}

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.debug("Malformed front matter in %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        return {}
    return data
