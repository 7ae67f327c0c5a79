#!/usr/bin/env python3
"""
Presentation
============
Caller-side touches applied to generated sentences before display. The
chain itself returns sentences exactly as sampled.
"""

import html


def capitalize_first_letter(text: str) -> str:
    """Upper-case the first ASCII letter in ``text``, if there is one."""
    for i, ch in enumerate(text):
        if 'a' <= ch <= 'z':
            return text[:i] + ch.upper() + text[i + 1:]
        if 'A' <= ch <= 'Z':
            return text
    return text


def to_html(text: str) -> str:
    return html.escape(text, quote=True)


def present(text: str, html: bool = False) -> str:
    """Capitalize, and escape for HTML when requested."""
    text = capitalize_first_letter(text)
    if html:
        text = to_html(text)
    return text


__all__ = ['capitalize_first_letter', 'to_html', 'present']
