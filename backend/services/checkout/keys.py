import re

from .constants import ITEM_ALIASES, KEY_FAMILIES

_WHITESPACE = re.compile(r"\s+")


def normalize_item_name(name: str | None) -> str:
    return _WHITESPACE.sub(" ", (name or "").strip().lower())


def _to_key(phrase: str) -> str:
    return phrase.replace(" ", "-")


def resolve_item_key(display_name: str | None) -> str:
    """Map an item display name to the entitlement key its quota is pooled under.

    Every name resolves to some key; an unknown name becomes its own key.
    """
    normalized = normalize_item_name(display_name)
    for pattern, key in KEY_FAMILIES:
        if pattern in normalized:
            return key
    return _to_key(ITEM_ALIASES.get(normalized, normalized))
