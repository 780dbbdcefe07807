from typing import Any


def coerce_value(value: Any) -> Any:
    """Turn "true"/"false" strings (any case) into booleans; leave the rest alone."""
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return value
