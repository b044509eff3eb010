"""Safe inline content parsing for card faces.

Card text is split into a closed set of fragments (text, bold, italic, code,
image, link, linebreak) so callers never have to inject raw markup:

    **bold** / __bold__     *italic* / _italic_     `code`
    ![alt](url)             [text](url)             newline or a literal \\n

Patterns are tried in that priority order at each position and the first
match wins. Matched content is opaque: formatting does not nest. Images and
links with a disallowed URL scheme are kept as literal text.
"""

import html
import re
import urllib.parse
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class PartType(str, Enum):
    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    IMAGE = "image"
    LINK = "link"
    LINEBREAK = "linebreak"


@dataclass(frozen=True)
class ContentPart:
    type: PartType
    content: str
    url: str | None = None
    alt: str | None = None


_IMAGE_RE = re.compile(r'!\[([^\]]*)\]\(([^)]+)\)')
_LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')
_BOLD_RE = re.compile(r'(\*\*|__)(.*?)\1')
_ITALIC_RE = re.compile(r'(\*|_)(.*?)\1')
_CODE_RE = re.compile(r'`([^`]+)`')
_SPECIAL_RE = re.compile(r'[*_`!\[\n\\]')

_LINK_SCHEMES = ("http", "https")


def is_valid_url(url: str) -> bool:
    try:
        parsed = urllib.parse.urlsplit(url.strip())
    except ValueError:
        return False
    return parsed.scheme.lower() in _LINK_SCHEMES and bool(parsed.netloc)


def is_valid_image_url(url: str) -> bool:
    if url.strip().lower().startswith("data:image/"):
        return True
    return is_valid_url(url)


def parse_content(content: str) -> Iterator[ContentPart]:
    """Yield the fragments of ``content`` in order."""
    if not content:
        return
    pos = 0
    end = len(content)
    while pos < end:
        m = _IMAGE_RE.match(content, pos)
        if m:
            alt, url = m.group(1), m.group(2)
            if is_valid_image_url(url):
                yield ContentPart(PartType.IMAGE, alt or "Image", url=url, alt=alt or "Image")
            else:
                yield ContentPart(PartType.TEXT, m.group(0))
            pos = m.end()
            continue

        m = _LINK_RE.match(content, pos)
        if m:
            text, url = m.group(1), m.group(2)
            if is_valid_url(url):
                yield ContentPart(PartType.LINK, text, url=url)
            else:
                yield ContentPart(PartType.TEXT, m.group(0))
            pos = m.end()
            continue

        m = _BOLD_RE.match(content, pos)
        if m:
            yield ContentPart(PartType.BOLD, m.group(2))
            pos = m.end()
            continue

        m = _ITALIC_RE.match(content, pos)
        if m:
            yield ContentPart(PartType.ITALIC, m.group(2))
            pos = m.end()
            continue

        m = _CODE_RE.match(content, pos)
        if m:
            yield ContentPart(PartType.CODE, m.group(1))
            pos = m.end()
            continue

        if content.startswith("\\n", pos):
            yield ContentPart(PartType.LINEBREAK, "")
            pos += 2
            continue
        if content[pos] == "\n":
            yield ContentPart(PartType.LINEBREAK, "")
            pos += 1
            continue

        m = _SPECIAL_RE.search(content, pos)
        if m is None:
            yield ContentPart(PartType.TEXT, content[pos:])
            return
        if m.start() == pos:
            # unmatched special character
            yield ContentPart(PartType.TEXT, content[pos])
            pos += 1
        else:
            yield ContentPart(PartType.TEXT, content[pos:m.start()])
            pos = m.start()


def render_html(content: str) -> str:
    """Render content to HTML built only from escaped fragments."""
    out = []
    for part in parse_content(content):
        text = html.escape(part.content)
        if part.type is PartType.BOLD:
            out.append(f"<strong>{text}</strong>")
        elif part.type is PartType.ITALIC:
            out.append(f"<em>{text}</em>")
        elif part.type is PartType.CODE:
            out.append(f"<code>{text}</code>")
        elif part.type is PartType.IMAGE:
            out.append(f'<img src="{html.escape(part.url)}" alt="{html.escape(part.alt)}" loading="lazy">')
        elif part.type is PartType.LINK:
            out.append(f'<a href="{html.escape(part.url)}" target="_blank" '
                       f'rel="noopener noreferrer">{text}</a>')
        elif part.type is PartType.LINEBREAK:
            out.append("<br>")
        else:
            out.append(text)
    return "".join(out)


def plain_text(content: str) -> str:
    """Flatten content to unformatted text (images become their alt text)."""
    out = []
    for part in parse_content(content):
        out.append("\n" if part.type is PartType.LINEBREAK else part.content)
    return "".join(out)
