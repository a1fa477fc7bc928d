"""
Markup minification for template sources.
"""
import re
from abc import ABC, abstractmethod
from typing import List

# Elements whose content is whitespace-sensitive or not markup
PRESERVED_ELEMENT = re.compile(
    r"(<(pre|textarea|script|style)\b.*?</\2\s*>)", re.IGNORECASE | re.DOTALL
)
TEMPLATE_TAG = re.compile(r"(\{\{.*?\}\}|\{%.*?%\}|\{#.*?#\})", re.DOTALL)
HTML_COMMENT = re.compile(r"<!--(?!\[if).*?-->", re.DOTALL)
ATTRIBUTE_VALUE = re.compile(r"""(=\s*(?:"[^"]*"|'[^']*'))""")
WHITESPACE = re.compile(r"\s+")

# A tag followed by whitespace and another tag; group 2 and 3 are the tag names
WHITESPACE_BETWEEN_TAGS = re.compile(
    r"""(</?([A-Za-z][\w:-]*)(?:"[^"]*"|'[^']*'|[^'"<>])*>)\s+(?=</?([A-Za-z][\w:-]*))"""
)

# Whitespace next to these elements is never rendered
BLOCK_ELEMENTS = frozenset([
    "address", "article", "aside", "base", "blockquote", "body", "caption",
    "col", "colgroup", "dd", "details", "dialog", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "head", "header", "hr", "html", "li", "link", "main",
    "meta", "nav", "ol", "optgroup", "option", "p", "section", "summary",
    "table", "tbody", "td", "tfoot", "th", "thead", "title", "tr", "ul",
])


class Minifier(ABC):
    """Compacts template source text without changing what it renders to."""

    @abstractmethod
    def minify(self, text: str) -> str:
        pass


class HtmlMinifier(Minifier):
    """
    Regex based HTML minifier that leaves template tags alone.

    Comments are removed (conditional comments excepted). Whitespace between
    two tags is dropped when either of them is a block-level element and
    collapses to a single space otherwise, as do other whitespace runs.
    Quoted attribute values, template tags and ``pre``, ``textarea``,
    ``script`` and ``style`` elements pass through verbatim.
    """

    def minify(self, text: str) -> str:
        parts: List[str] = []
        for index, chunk in enumerate(PRESERVED_ELEMENT.split(text)):
            # split() yields: text, element, element-name, text, ...
            position = index % 3
            if position == 2:
                continue
            if position == 1:
                parts.append(chunk)
            else:
                parts.append(self._minify_markup(chunk))
        return "".join(parts).strip()

    def _minify_markup(self, markup: str) -> str:
        pieces = TEMPLATE_TAG.split(markup)
        # Odd positions are template tags
        for index in range(0, len(pieces), 2):
            pieces[index] = self._minify_literal(pieces[index])
        return "".join(pieces)

    def _minify_literal(self, literal: str) -> str:
        literal = HTML_COMMENT.sub("", literal)
        literal = WHITESPACE_BETWEEN_TAGS.sub(self._join_tags, literal)

        pieces = ATTRIBUTE_VALUE.split(literal)
        # Odd positions are quoted attribute values
        for index in range(0, len(pieces), 2):
            pieces[index] = WHITESPACE.sub(" ", pieces[index])
        return "".join(pieces)

    @staticmethod
    def _join_tags(match: "re.Match") -> str:
        tag, before, after = match.groups()
        if before.lower() in BLOCK_ELEMENTS or after.lower() in BLOCK_ELEMENTS:
            return tag
        return tag + " "
