from typing import Optional


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip optional free text; blank strings are stored as NULL."""
    if value is None:
        return None
    return value.strip() or None
