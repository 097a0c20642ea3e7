"""Conversion of display names into namespace-safe segments."""
import re
import unicodedata


# Applied in order before transliteration. Dots become underscores so a slug
# never introduces a path separator for dot-delimited metric backends.
SUBSTITUTIONS = (
    (".", "_"),
    ('"', ""),
    ("'", ""),
    ("’", ""),
    ("‒", "-"),
    ("–", "-"),
    ("—", "-"),
    ("―", "-"),
    ("&", " and "),
    ("@", " at "),
)


def make_slug(name: str) -> str:
    """Convert a repository or label name into a namespace segment.

    >>> make_slug("Good First Issue")
    'good-first-issue'
    >>> make_slug("socket.io")
    'socket_io'
    >>> make_slug("Q&A")
    'q-and-a'
    """
    slug = name
    for old, new in SUBSTITUTIONS:
        slug = slug.replace(old, new)
    slug = unicodedata.normalize("NFKD", slug).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9_]+", "-", slug.lower())
    return slug.strip("-_")
