"""Human readable memory sizes as accepted by redis.conf."""

import re

from redistopology.exceptions import ConfigValueError

# Same units redis.conf accepts: k/m/g are powers of 1000, kb/mb/gb powers of 1024.
_UNITS = {
    "": 1,
    "b": 1,
    "k": 1000,
    "kb": 1024,
    "m": 1000 * 1000,
    "mb": 1024 * 1024,
    "g": 1000 * 1000 * 1000,
    "gb": 1024 * 1024 * 1024,
}

_SIZE_RE = re.compile(r"(-?\d+)([a-z]*)")


def parse_memory_size(key: str, value: str) -> str:
    """Normalize a size value like "2gb" to a byte count string.

    Raises:
        ConfigValueError: value has no number or an unknown unit
    """
    match = _SIZE_RE.fullmatch(value.strip().lower())
    if match is None or match.group(2) not in _UNITS:
        raise ConfigValueError(key, value)
    return str(int(match.group(1)) * _UNITS[match.group(2)])
