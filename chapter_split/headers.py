"""Volume header detection.

Only consulted for lines that did not parse as a chapter.  A header is
either a bare number (``2``) or a volume keyword followed by a number
(``VOLUME 2``, ``Disc 3: Guard Passing``, ``vol.4``).  Anything else
without a timestamp is descriptive text and gets dropped.
"""

from __future__ import annotations

import re

BARE_NUMBER_RE = re.compile(r"^\d+$")
KEYWORD_RE = re.compile(
    r"\b(?:volume|vol\.?|disc|part|section|chapter)\s*\d+\b",
    re.IGNORECASE,
)


def is_volume_header(line: str) -> bool:
    line = line.strip()
    if not line:
        return False
    return bool(BARE_NUMBER_RE.match(line) or KEYWORD_RE.search(line))
