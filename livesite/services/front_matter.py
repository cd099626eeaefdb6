import logging
from typing import Optional, Tuple

import yaml
from frontmatter import YAMLHandler
from pydantic import ValidationError

from livesite.schemas.content import ERROR_FRONT_MATTER, FrontMatter

logger = logging.getLogger(__name__)

_handler = YAMLHandler()


def split_front_matter(text: str) -> Tuple[Optional[str], str]:
    """Split text into the raw YAML block (None when absent) and the body."""
    if not _handler.detect(text):
        return None, text
    try:
        raw, body = _handler.split(text)
    except ValueError:
        # An opening fence without a closing one is just body text
        return None, text
    return raw, body


def parse_front_matter(
    text: str, source: str = "<string>"
) -> Tuple[Optional[FrontMatter], str]:
    """
    Parse leading YAML front matter.

    Returns (None, text) when the file has no front matter block, and the
    ERROR_FRONT_MATTER sentinel when the block is present but malformed or
    missing one of title / date / slug.
    """
    raw, body = split_front_matter(text)
    if raw is None:
        return None, body

    try:
        data = _handler.load(raw)
        return FrontMatter.model_validate(data if data is not None else {}), body
    except (yaml.YAMLError, ValidationError) as e:
        logger.error(f"Failed to parse front matter in {source}: {e}")
        return ERROR_FRONT_MATTER, body
