"""
Allow-list HTML sanitizer for rich-text columns (news bodies, FAQ answers,
judge profiles). Content is authored in the admin back-office, but it is
rendered inside foreign host pages, so only a small formatting subset survives.
"""

from html import escape
from html.parser import HTMLParser

ALLOWED_TAGS = frozenset(
    {
        "p", "br", "strong", "b", "em", "i", "u", "a", "ul", "ol", "li",
        "span", "h3", "h4", "blockquote",
    }
)
VOID_TAGS = frozenset({"br"})
# Dropped together with everything inside them
DROP_CONTENT_TAGS = frozenset({"script", "style", "iframe", "object", "embed", "template"})
SAFE_URL_SCHEMES = ("http://", "https://", "mailto:")


def is_safe_href(href: str) -> bool:
    value = href.strip().lower()
    if value.startswith(SAFE_URL_SCHEMES):
        return True
    # Relative links and fragments carry no scheme
    return ":" not in value.split("/", 1)[0]


class _AllowListParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self.open_tags: list[str] = []
        self._drop_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth += 1
            return
        if self._drop_depth or tag not in ALLOWED_TAGS:
            return

        rendered = tag
        if tag == "a":
            href = dict(attrs).get("href") or ""
            if href and is_safe_href(href):
                rendered += f' href="{escape(href, quote=True)}"'
                if href.startswith(("http://", "https://")):
                    rendered += ' target="_blank" rel="noopener noreferrer"'

        self.parts.append(f"<{rendered}>")
        if tag not in VOID_TAGS:
            self.open_tags.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in VOID_TAGS and not self._drop_depth:
            self.parts.append(f"<{tag}>")

    def handle_endtag(self, tag: str) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth = max(0, self._drop_depth - 1)
            return
        if self._drop_depth or tag not in self.open_tags:
            return
        # Close anything left open inside this element
        while self.open_tags:
            current = self.open_tags.pop()
            self.parts.append(f"</{current}>")
            if current == tag:
                break

    def handle_data(self, data: str) -> None:
        if not self._drop_depth:
            self.parts.append(escape(data, quote=False))

    def result(self) -> str:
        closing = "".join(f"</{tag}>" for tag in reversed(self.open_tags))
        return "".join(self.parts) + closing


def sanitize_html(content: str | None) -> str:
    """Returns `content` reduced to the allowed tag subset."""
    if not content:
        return ""
    parser = _AllowListParser()
    parser.feed(content)
    parser.close()
    return parser.result()


class _TextOnlyParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._drop_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth = max(0, self._drop_depth - 1)

    def handle_data(self, data: str) -> None:
        if not self._drop_depth:
            self.parts.append(data)


def strip_tags(content: str | None) -> str:
    """Plain-text projection of rich text, used for truncation previews."""
    if not content:
        return ""
    parser = _TextOnlyParser()
    parser.feed(content)
    parser.close()
    return " ".join("".join(parser.parts).split())
