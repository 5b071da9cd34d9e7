"""
Document Analyzer

One depth-first, pre-order walk over the parsed page collects every
structural signal at once: title, markup version, heading counts, login-form
presence and the raw hrefs of all anchors (in document order).
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Doctype, NavigableString, PreformattedString, Tag

from app.features.crawl.schemas.analysis import HTML5, XHTML, DocumentOutline, empty_heading_counts
from app.features.crawl.services.login_form import attribute_text, is_login_form
from app.platform.exceptions import ParseError

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"
HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}


def parse_document(content: bytes) -> BeautifulSoup:
    """Parse raw page bytes into a tree. Every attribute comes back as a plain string."""
    try:
        return BeautifulSoup(content, HTML_PARSER, multi_valued_attributes=None)
    except (ParserRejectedMarkup, AssertionError, ValueError) as exc:
        raise ParseError(f"Failed to parse HTML: {exc}") from exc


def extract_text(tag: Tag) -> str:
    """Concatenate the tag's descendant text nodes, each trimmed, then trim the whole."""
    parts = []
    for node in tag.descendants:
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            parts.append(node.strip())
    return "".join(parts).strip()


def detect_markup_version(html: Tag) -> str:
    parent = html.parent
    if isinstance(parent, BeautifulSoup):
        for sibling in parent.contents:
            if isinstance(sibling, Doctype) and "html" in sibling.lower():
                return HTML5

    for name in html.attrs:
        if name == "xmlns" or "xhtml" in attribute_text(html, name):
            return XHTML

    return HTML5


@dataclass
class _OutlineBuilder:
    """Accumulator owned by exactly one ``analyze_document`` call."""
    title: str = ""
    markup_version: Optional[str] = None
    heading_counts: Dict[int, int] = field(default_factory=empty_heading_counts)
    has_login_form: bool = False
    hrefs: List[str] = field(default_factory=list)

    def visit(self, tag: Tag) -> None:
        name = tag.name

        if name == "html":
            if self.markup_version is None:
                self.markup_version = detect_markup_version(tag)
        elif name == "title":
            text = extract_text(tag)
            if text and not self.title:
                self.title = text
        elif name in HEADING_TAGS:
            self.heading_counts[HEADING_TAGS[name]] += 1
        elif name == "a":
            href = tag.get("href")
            if href:
                self.hrefs.append(attribute_text(tag, "href"))
        elif name == "form":
            if not self.has_login_form and is_login_form(tag):
                self.has_login_form = True

    def build(self) -> DocumentOutline:
        return DocumentOutline(
            title=self.title,
            markup_version=self.markup_version or HTML5,
            heading_counts=self.heading_counts,
            has_login_form=self.has_login_form,
            hrefs=self.hrefs,
        )


def analyze_document(document: Tag) -> DocumentOutline:
    """
    Walk ``document`` once and return its outline.

    Uses an explicit stack so deeply nested markup cannot hit the recursion
    limit; children are pushed in reverse to keep pre-order.
    """
    builder = _OutlineBuilder()
    stack = [document]

    while stack:
        node = stack.pop()
        if not isinstance(node, Tag):
            continue
        if not isinstance(node, BeautifulSoup):
            builder.visit(node)
        stack.extend(reversed(node.contents))

    outline = builder.build()
    logger.debug(
        f"Document outline: title={outline.title!r}, version={outline.markup_version}, "
        f"anchors={len(outline.hrefs)}, login_form={outline.has_login_form}"
    )
    return outline
