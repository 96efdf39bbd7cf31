"""Secret masking for display."""

from typing import Any

SECRET_KEY_MARKERS = ("key", "token", "secret", "password")
MASK = "****"


def _is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SECRET_KEY_MARKERS)


def mask_value(value: str) -> str:
    if len(value) <= 8:
        return MASK
    return f"{value[:4]}{MASK}{value[-2:]}"


def mask_secrets(document: Any) -> Any:
    """Return a copy of a JSON-like value with secret-looking string fields masked."""
    if isinstance(document, list):
        return [mask_secrets(item) for item in document]
    if not isinstance(document, dict):
        return document

    masked: dict[str, Any] = {}
    for key, value in document.items():
        if isinstance(value, str) and _is_secret_key(key):
            masked[key] = mask_value(value)
        else:
            masked[key] = mask_secrets(value)
    return masked


def mask_api_key(api_key: str) -> str:
    """Short form used for universal provider keys."""
    return f"{api_key[:3]}{MASK}"
