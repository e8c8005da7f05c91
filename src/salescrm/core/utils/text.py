"""Text processing utilities."""

import re

from salescrm.core.constants import MAX_SLUG_LENGTH


def generate_slug(name: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Generate a URL-safe slug from a tenant or company name.

    Args:
        name: The input string to slugify
        max_length: Maximum length of output slug

    Returns:
        Lowercase slug, or "tenant" when nothing usable remains

    Examples:
        >>> generate_slug("Demo Company")
        'demo-company'
        >>> generate_slug("  Acme, Inc.  ")
        'acme-inc'
    """
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s_]+", "-", slug).strip("-")
    return slug[:max_length] or "tenant"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally.

    Use together with ``escape="\\\\"`` on the column operator.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
