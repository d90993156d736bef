import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text):
    """Lower-case ``text`` and collapse every run of other characters to one hyphen."""
    return _NON_ALNUM.sub("-", (text or "").lower()).strip("-")
