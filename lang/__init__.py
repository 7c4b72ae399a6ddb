"""Language packs for user-facing bot text."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LANG_DIR = Path(__file__).parent
DEFAULT_LANGUAGE = "en"


def _merge(base, override):
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_pack(code):
    with open(LANG_DIR / f"{code}.json", "r", encoding="utf-8") as f:
        return json.load(f)


def load_language(code=DEFAULT_LANGUAGE):
    """
    Load the language pack for `code`, layered over the default pack.

    Unknown codes log a warning and return the default pack, so every key the bot
    uses is always present.
    """
    pack = _read_pack(DEFAULT_LANGUAGE)
    code = (code or DEFAULT_LANGUAGE).lower()
    if code == DEFAULT_LANGUAGE:
        return pack
    try:
        return _merge(pack, _read_pack(code))
    except FileNotFoundError:
        logger.warning(f"Language pack '{code}' not found, using '{DEFAULT_LANGUAGE}'")
        return pack


def get_text(lang, key, **replacements):
    """
    Look up a dotted key such as "play.embed.error" in a loaded pack.

    `{name}` placeholders are substituted from `replacements`. A missing key returns
    the key itself.
    """
    node = lang
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return key
        node = node[part]
    if not isinstance(node, str):
        return key
    for name, value in replacements.items():
        node = node.replace("{" + name + "}", str(value))
    return node
