import re
from decimal import Decimal
from typing import Annotated

import bleach
from pydantic import BeforeValidator, PlainSerializer


def sanitize_text(value):
    """Remove every HTML tag from user-supplied text, keeping the words."""
    if not isinstance(value, str):
        return value
    return bleach.clean(value, tags=[], attributes={}, strip=True, strip_comments=True).strip()


def not_null(value):
    """Reject an explicit ``null`` for a field that may only be omitted."""
    if value is None:
        raise ValueError("Field may not be null")
    return value


def _strip(value):
    return value.strip() if isinstance(value, str) else value


# Money is exact in storage and arithmetic, plain numbers on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
CleanText = Annotated[str, BeforeValidator(sanitize_text)]
StrippedStr = Annotated[str, BeforeValidator(_strip)]


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-")
