"""Placeholder substitution for uploaded contract templates.

``.docx`` templates are edited through python-docx so that text split over
several runs is still found. Anything python-docx cannot open goes through a
byte-level rewrite instead.
"""
import io
import logging
import re
import zipfile
from dataclasses import dataclass, field
from typing import Callable, Optional
from xml.sax.saxutils import escape

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from lxml.etree import XMLSyntaxError

from .matching import VariableResolver

logger = logging.getLogger("staffdesk.contract")

PLACEHOLDER_RE = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")
PLACEHOLDER_BYTES_RE = re.compile(rb"\{\{\s*([^{}]+?)\s*\}\}")
_XML_TAG_RE = re.compile(r"<[^>]+>")

STRATEGY_DOCX = "docx"
STRATEGY_ZIP_XML = "zip-xml"
STRATEGY_RAW = "raw"


class TemplateRenderError(Exception):
    pass


@dataclass
class RenderResult:
    content: bytes
    strategy: str
    replaced: dict[str, str] = field(default_factory=dict)
    unresolved: list[str] = field(default_factory=list)


class _Substituter:
    def __init__(self, values: dict[str, str], resolver: VariableResolver, escape_xml: bool = False):
        self.values = values
        self.resolver = resolver
        self.escape_xml = escape_xml
        self.replaced: dict[str, str] = {}
        self.unresolved: list[str] = []

    def lookup(self, name: str) -> Optional[str]:
        key = self.resolver.resolve(name)
        if key is None:
            if name not in self.unresolved:
                self.unresolved.append(name)
            return None
        self.replaced[name] = key
        value = self.values.get(key, "")
        return escape(value) if self.escape_xml else value

    def text(self, match: re.Match) -> str:
        value = self.lookup(match.group(1))
        return match.group(0) if value is None else value

    def raw(self, match: re.Match) -> bytes:
        value = self.lookup(match.group(1).decode("utf-8", errors="replace"))
        return match.group(0) if value is None else value.encode("utf-8")


def _replace_in_paragraph(paragraph, lookup: Callable[[str], Optional[str]]) -> None:
    runs = paragraph.runs
    if not runs:
        return
    full = "".join(r.text for r in runs)
    if "{{" not in full:
        return

    # right to left so earlier offsets stay valid
    for m in reversed(list(PLACEHOLDER_RE.finditer(full))):
        value = lookup(m.group(1))
        if value is None:
            continue
        start, end = m.span()
        pos, first = 0, True
        for run in runs:
            text = run.text
            run_start, run_end = pos, pos + len(text)
            pos = run_end
            if run_end <= start or run_start >= end:
                continue
            a = max(start, run_start) - run_start
            b = min(end, run_end) - run_start
            if first:
                run.text = text[:a] + value + text[b:]
                first = False
            else:
                run.text = text[:a] + text[b:]


def _iter_paragraphs(container):
    yield from container.paragraphs
    for table in container.tables:
        seen = set()
        for row in table.rows:
            for cell in row.cells:
                # merged cells come back once per grid position
                if id(cell._tc) in seen:
                    continue
                seen.add(id(cell._tc))
                yield from _iter_paragraphs(cell)


def _iter_document_paragraphs(doc):
    yield from _iter_paragraphs(doc)
    for section in doc.sections:
        for part in (
            section.header, section.footer,
            section.first_page_header, section.first_page_footer,
            section.even_page_header, section.even_page_footer,
        ):
            # a linked header has no part of its own; touching it would create one
            if part.is_linked_to_previous:
                continue
            yield from _iter_paragraphs(part)


def _open_docx(content: bytes):
    try:
        return Document(io.BytesIO(content))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError, XMLSyntaxError) as e:
        logger.warning("template is not a usable docx (%s), falling back to binary replacement", e)
        return None


def _render_docx(doc, sub: _Substituter) -> bytes:
    for paragraph in _iter_document_paragraphs(doc):
        _replace_in_paragraph(paragraph, sub.lookup)
    out = io.BytesIO()
    doc.save(out)
    return out.getvalue()


def _render_zip(content: bytes, sub: _Substituter) -> bytes:
    out = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(content)) as src, zipfile.ZipFile(out, "w") as dst:
        for item in src.infolist():
            data = src.read(item.filename)
            if item.filename.endswith(".xml"):
                text = data.decode("utf-8")
                data = PLACEHOLDER_RE.sub(sub.text, text).encode("utf-8")
            dst.writestr(item, data)
    return out.getvalue()


def render_template(content: bytes, values: dict[str, str], resolver: Optional[VariableResolver] = None) -> RenderResult:
    if not content:
        raise TemplateRenderError("template is empty")
    resolver = resolver or VariableResolver(values)

    doc = _open_docx(content)
    if doc is not None:
        sub = _Substituter(values, resolver)
        output, strategy = _render_docx(doc, sub), STRATEGY_DOCX
    elif zipfile.is_zipfile(io.BytesIO(content)):
        sub = _Substituter(values, resolver, escape_xml=True)
        try:
            output, strategy = _render_zip(content, sub), STRATEGY_ZIP_XML
        except (zipfile.BadZipFile, UnicodeDecodeError) as e:
            raise TemplateRenderError(f"template archive could not be rewritten: {e}")
    else:
        sub = _Substituter(values, resolver)
        output, strategy = PLACEHOLDER_BYTES_RE.sub(sub.raw, content), STRATEGY_RAW

    if sub.unresolved:
        logger.info("unresolved placeholders left in place: %s", ", ".join(sub.unresolved))
    return RenderResult(content=output, strategy=strategy, replaced=sub.replaced, unresolved=sub.unresolved)


def find_placeholders(content: bytes) -> list[str]:
    """Placeholder names in order of first appearance."""
    texts: list[str] = []
    doc = _open_docx(content) if content else None
    if doc is not None:
        texts = ["".join(r.text for r in p.runs) for p in _iter_document_paragraphs(doc)]
    elif content and zipfile.is_zipfile(io.BytesIO(content)):
        with zipfile.ZipFile(io.BytesIO(content)) as src:
            for name in src.namelist():
                if name.endswith(".xml"):
                    texts.append(_XML_TAG_RE.sub("", src.read(name).decode("utf-8", errors="replace")))
    elif content:
        texts = [content.decode("utf-8", errors="replace")]

    found: list[str] = []
    for text in texts:
        for m in PLACEHOLDER_RE.finditer(text):
            if m.group(1) not in found:
                found.append(m.group(1))
    return found
