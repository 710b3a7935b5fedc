"""Application identifier validation."""

import re

APP_ID_PATTERN = re.compile(r"[A-Za-z0-9\-_]{1,64}")


def validate_app_id(app_id: object) -> bool:
    """Check that an application identifier is safe to use as a store key.

    Only letters, digits, dashes and underscores are accepted, up to 64
    characters. Lowercasing is left to the caller once this passes.
    """
    if not isinstance(app_id, str) or not app_id:
        return False
    return APP_ID_PATTERN.fullmatch(app_id) is not None
