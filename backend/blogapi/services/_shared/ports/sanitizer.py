from __future__ import annotations

from typing import Protocol


class HTMLSanitizer(Protocol):
    """
    Port for cleaning user-supplied markup.

    ``sanitize_ugc`` keeps a safe formatting allow-list (post bodies);
    ``strip_tags`` removes every tag (comments, short text fields).
    """

    def sanitize_ugc(self, html: str) -> str: ...

    def strip_tags(self, text: str) -> str: ...
