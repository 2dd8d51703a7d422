"""
Text processing utilities for the LLM layer.

Derives the plain-text body sent to the classifier. All functions are pure.
"""

import re
from typing import Optional


_STYLE_BLOCK = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_SCRIPT_BLOCK = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def strip_html(html: str) -> str:
    """
    Convert an HTML body to plain text.

    Removes <style> and <script> blocks with their content, replaces every
    remaining tag with a space, collapses whitespace runs and trims.

    Examples:
        >>> strip_html("<p>Hi <b>there</b></p>")
        'Hi there'
        >>> strip_html("<style>p {color: red}</style><p>Hello</p>")
        'Hello'
    """
    text = _STYLE_BLOCK.sub("", html)
    text = _SCRIPT_BLOCK.sub("", text)
    text = _TAG.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def normalize_body(body_text: Optional[str], body_html: Optional[str]) -> str:
    """
    Pick the body to classify: the text body if present, else stripped HTML.

    Returns an empty string when neither is present.
    """
    if body_text:
        return body_text
    return strip_html(body_html or "")
