"""HTML sanitizing backed by ``nh3`` (ammonia)."""

from __future__ import annotations

import nh3

from blogapi.services._shared.ports import HTMLSanitizer

# Formatting allowed in post bodies.
UGC_TAGS = frozenset(
    {
        "a", "abbr", "b", "blockquote", "br", "code", "del", "em", "figcaption",
        "figure", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "li",
        "ol", "p", "pre", "s", "span", "strong", "sub", "sup", "table", "tbody",
        "td", "th", "thead", "tr", "u", "ul",
    }
)  # fmt: skip
UGC_ATTRIBUTES = {
    "a": {"href", "title"},
    "img": {"src", "alt", "title", "width", "height"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan"},
    "code": {"class"},
}
URL_SCHEMES = frozenset({"http", "https", "mailto"})


class Nh3Sanitizer(HTMLSanitizer):
    """UGC allow-list for posts; tag stripping for comments."""

    def sanitize_ugc(self, html: str) -> str:
        return nh3.clean(
            html or "",
            tags=set(UGC_TAGS),
            attributes={k: set(v) for k, v in UGC_ATTRIBUTES.items()},
            url_schemes=set(URL_SCHEMES),
            link_rel="nofollow noopener noreferrer",
        )

    def strip_tags(self, text: str) -> str:
        return nh3.clean(text or "", tags=set(), attributes={}).strip()
