from typing import Any, Mapping

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def set_nested(obj: dict[str, Any], key_path: str, value: Any) -> None:
    parts = key_path.split(".")
    cur = obj
    for part in parts[:-1]:
        if not isinstance(cur.get(part), dict):
            cur[part] = {}
        cur = cur[part]
    cur[parts[-1]] = value


def get_nested(obj: Mapping[str, Any], key_path: str) -> Any:
    cur: Any = obj
    for part in key_path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return None
        cur = cur[part]
    return cur


def flatten_messages(messages: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """``{"ai": {"chatTitle": "x"}}`` -> ``{"ai.chatTitle": "x"}``."""
    flat: dict[str, str] = {}
    for key, value in messages.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_messages(value, f"{full_key}."))
        elif isinstance(value, str):
            flat[full_key] = value
    return flat


def expand_messages(flat: Mapping[str, Any]) -> dict[str, Any]:
    """Inverse of :func:`flatten_messages`; dotted keys become nested objects."""
    nested: dict[str, Any] = {}
    for key, value in flat.items():
        if isinstance(value, Mapping):
            value = expand_messages(value)
        set_nested(nested, key, value)
    return nested


def short_hash(text: str) -> str:
    """Stable 32-bit string hash in base 36, computed over UTF-16 code units."""
    raw = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    h = abs(h)
    if h == 0:
        return "0"
    digits = []
    while h:
        h, rem = divmod(h, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))
