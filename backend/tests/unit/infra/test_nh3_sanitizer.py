"""Unit tests for the nh3-backed HTML sanitizer."""

from __future__ import annotations

from blogapi.infra.html.nh3_sanitizer import Nh3Sanitizer


def test_ugc_keeps_formatting_and_drops_scripts():
    html = '<p>Hello <strong>world</strong><script>alert(1)</script></p>'

    cleaned = Nh3Sanitizer().sanitize_ugc(html)

    assert "<strong>world</strong>" in cleaned
    assert "<script>" not in cleaned
    assert "alert(1)" not in cleaned


def test_ugc_drops_event_handlers_and_js_urls():
    html = '<a href="javascript:alert(1)" onclick="x()">link</a><img src="x.png" onerror="y()">'

    cleaned = Nh3Sanitizer().sanitize_ugc(html)

    assert "javascript:" not in cleaned
    assert "onclick" not in cleaned
    assert "onerror" not in cleaned
    assert 'src="x.png"' in cleaned


def test_ugc_links_get_rel():
    cleaned = Nh3Sanitizer().sanitize_ugc('<a href="https://example.com">x</a>')
    assert 'rel="nofollow noopener noreferrer"' in cleaned


def test_strip_tags_keeps_text_only():
    assert Nh3Sanitizer().strip_tags("  <b>nice</b> <i>post</i>  ") == "nice post"


def test_strip_tags_of_markup_only_is_empty():
    assert Nh3Sanitizer().strip_tags("<script>alert(1)</script>") == ""
