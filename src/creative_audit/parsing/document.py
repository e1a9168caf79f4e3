"""Tolerant HTML tokenizer.

Builds a flat list of elements (tag, attributes, position, start-tag snippet
and the raw text of ``<script>``/``<style>``) from the standard-library
``html.parser``. Tag balance is tracked on the side so the markup check can
report unclosed and stray tags without a second parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Iterator, Optional

from ..exceptions.taxonomy import AuditError, ErrorCode
from ..logging_config import get_logger

logger = get_logger(__name__)

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# End tags HTML lets authors omit.
OPTIONAL_END_TAGS = frozenset(
    {
        "html",
        "head",
        "body",
        "p",
        "li",
        "dt",
        "dd",
        "option",
        "optgroup",
        "tr",
        "td",
        "th",
        "thead",
        "tbody",
        "tfoot",
        "colgroup",
        "rp",
        "rt",
    }
)

RAW_TEXT_ELEMENTS = frozenset({"script", "style"})


@dataclass
class Element:
    tag: str
    attrs: dict[str, str]
    line: int
    column: int
    snippet: str = ""
    text: str = ""

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name.lower(), default)

    def has(self, name: str) -> bool:
        return name.lower() in self.attrs


@dataclass
class MarkupProblem:
    message: str
    line: Optional[int] = None


@dataclass
class HtmlDocument:
    path: str
    elements: list[Element] = field(default_factory=list)
    problems: list[MarkupProblem] = field(default_factory=list)

    def iter(self, tag: Optional[str] = None) -> Iterator[Element]:
        for el in self.elements:
            if tag is None or el.tag == tag:
                yield el

    def find_all(self, tag: str, attr: Optional[str] = None) -> list[Element]:
        """Elements named ``tag``; with ``attr``, only those carrying it."""
        return [el for el in self.iter(tag) if attr is None or el.has(attr)]

    def find(self, tag: str, attr: Optional[str] = None) -> Optional[Element]:
        found = self.find_all(tag, attr)
        return found[0] if found else None

    def with_attribute(self, attr: str) -> list[Element]:
        return [el for el in self.elements if el.has(attr)]


class _DocumentBuilder(HTMLParser):
    def __init__(self, doc: HtmlDocument) -> None:
        super().__init__(convert_charrefs=True)
        self.doc = doc
        self._stack: list[Element] = []
        self._raw: Optional[Element] = None

    def _element(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> Element:
        line, offset = self.getpos()
        values: dict[str, str] = {}
        for name, value in attrs:
            values.setdefault(name.lower(), value if value is not None else "")
        el = Element(
            tag=tag.lower(),
            attrs=values,
            line=line,
            column=offset + 1,
            snippet=self.get_starttag_text() or "",
        )
        self.doc.elements.append(el)
        return el

    def handle_starttag(self, tag, attrs):
        el = self._element(tag, attrs)
        if el.tag in VOID_ELEMENTS:
            return
        self._stack.append(el)
        if el.tag in RAW_TEXT_ELEMENTS:
            self._raw = el

    def handle_startendtag(self, tag, attrs):
        self._element(tag, attrs)

    def handle_endtag(self, tag):
        tag = tag.lower()
        if self._raw is not None and self._raw.tag == tag:
            self._raw = None
        if tag in VOID_ELEMENTS:
            return

        for i in range(len(self._stack) - 1, -1, -1):
            if self._stack[i].tag == tag:
                for unclosed in self._stack[i + 1 :]:
                    self._unclosed(unclosed)
                del self._stack[i:]
                return

        line, _ = self.getpos()
        self.doc.problems.append(MarkupProblem(f"Unexpected closing tag </{tag}>", line))

    def handle_data(self, data):
        if self._raw is not None:
            self._raw.text += data

    def finish(self) -> None:
        self.close()
        for el in self._stack:
            self._unclosed(el)
        self._stack.clear()

    def _unclosed(self, el: Element) -> None:
        if el.tag not in OPTIONAL_END_TAGS:
            self.doc.problems.append(MarkupProblem(f"Unclosed <{el.tag}>", el.line))


def parse_html(text: str, path: str) -> HtmlDocument:
    """Parse ``text`` into an :class:`HtmlDocument`.

    Never raises on malformed markup: tokenizer failures are recorded as a
    problem and the elements seen so far are kept.
    """
    doc = HtmlDocument(path=path)
    builder = _DocumentBuilder(doc)
    try:
        builder.feed(text)
        builder.finish()
    except (AssertionError, ValueError) as e:
        audit_error = AuditError(
            message=f"HTML tokenizer stopped early in {path}: {e}",
            code=ErrorCode.CA201,
            context={"path": path},
            recovery_hint="Run the document through an HTML validator",
        )
        logger.warning(str(audit_error), extra={"audit_error": audit_error.to_json()})
        doc.problems.append(MarkupProblem(f"Tokenizer error: {e}"))
    return doc
