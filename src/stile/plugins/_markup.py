"""Lightweight JSX / ES module scanning shared by the built-in plugins.

This is not a parser. It recognises import declarations, exported
components and opening tags with their attribute names, and yields nothing
for anything else. Heuristic misses are acceptable; exceptions are not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

JSX_FILE = re.compile(r"\.(j|t)sx$")
SCRIPT_FILE = re.compile(r"\.(j|t)sx?$|\.m?js$")
STYLESHEET_FILE = re.compile(r"\.(css|scss|sass|less)$")
MARKUP_FILE = re.compile(r"\.(j|t)sx$|\.html?$")

_IDENT = r"[A-Za-z_$][\w$]*"
_IDENT_RE = re.compile(_IDENT)

_IMPORT_FROM_RE = re.compile(
    r"""^[ \t]*import\s+(?P<clause>[^'";]*?)\s+from\s+['"](?P<source>[^'"]+)['"]""",
    re.MULTILINE,
)
_IMPORT_TYPE_RE = re.compile(r"^type\s+")
_SIDE_EFFECT_IMPORT_RE = re.compile(r"""^[ \t]*import\s+['"](?P<source>[^'"]+)['"]""", re.MULTILINE)
_REQUIRE_RE = re.compile(
    rf"""(?:const|let|var)\s+(?P<local>{_IDENT})\s*=\s*require\(\s*['"](?P<source>[^'"]+)['"]\s*\)"""
)

_EXPORTED_COMPONENT_RE = re.compile(
    r"^[ \t]*export\s+(?:default\s+)?(?:async\s+)?(?:function|class|const|let|var)\s+(?P<name>[A-Z][\w$]*)",
    re.MULTILINE,
)

_TAG_OPEN_RE = re.compile(r"<(?P<name>[A-Za-z][\w.:-]*)")
# Words after which ``<`` starts markup rather than a comparison or generic.
_MARKUP_KEYWORDS = frozenset({"return", "yield", "await", "default", "case", "else", "do", "in", "of"})
_ATTRIBUTE_RE = re.compile(r"[A-Za-z_:][\w:.-]*")
_MAX_TAG_LENGTH = 20_000


@dataclass(frozen=True)
class ImportBinding:
    """One name bound by an import declaration.

    Attributes:
        local: Name usable in this file.
        imported: Exported name, ``"default"`` or ``"*"`` for namespaces.
        source: Module specifier.
    """

    local: str
    imported: str
    source: str


@dataclass(frozen=True)
class Element:
    """An opening tag found in markup.

    Attributes:
        name: Tag name as written (``div``, ``Button``, ``UI.Card``).
        attributes: Attribute names in order of appearance.
        spread: True if the tag spreads props (``{...rest}``).
        start: Offset of ``<``.
        end: Offset just past the closing ``>`` of the opening tag.
        self_closing: True for ``<Tag />``.
    """

    name: str
    attributes: tuple[str, ...]
    spread: bool
    start: int
    end: int
    self_closing: bool

    @property
    def is_component(self) -> bool:
        """Capitalised or member-expression tags are components."""
        return self.name[0].isupper() or "." in self.name

    @property
    def root(self) -> str:
        """Leading identifier of a member expression (``UI`` for ``UI.Card``)."""
        return self.name.split(".", 1)[0]

    def has_attribute(self, *names: str) -> bool:
        return any(name in self.attributes for name in names)


def _parse_clause(clause: str, source: str) -> list[ImportBinding]:
    clause = _IMPORT_TYPE_RE.sub("", clause.strip())
    bindings: list[ImportBinding] = []
    named = ""
    brace = re.search(r"\{([^}]*)\}", clause)
    if brace:
        named = brace.group(1)
        clause = clause[: brace.start()] + clause[brace.end():]
    for part in clause.split(","):
        part = part.strip()
        namespace = re.fullmatch(rf"\*\s*as\s+({_IDENT})", part)
        if namespace:
            bindings.append(ImportBinding(namespace.group(1), "*", source))
        elif _IDENT_RE.fullmatch(part):
            bindings.append(ImportBinding(part, "default", source))
    for spec in named.split(","):
        spec = _IMPORT_TYPE_RE.sub("", spec.strip())
        if not spec:
            continue
        imported, _, local = spec.partition(" as ")
        imported = imported.strip()
        local = local.strip() or imported
        if _IDENT_RE.fullmatch(local):
            bindings.append(ImportBinding(local, imported, source))
    return bindings


def parse_imports(source: str) -> list[ImportBinding]:
    """Every name bound by ``import ... from`` or ``require()``."""
    bindings: list[ImportBinding] = []
    for match in _IMPORT_FROM_RE.finditer(source):
        bindings.extend(_parse_clause(match.group("clause"), match.group("source")))
    for match in _REQUIRE_RE.finditer(source):
        bindings.append(ImportBinding(match.group("local"), "default", match.group("source")))
    return bindings


def import_sources(source: str) -> list[str]:
    """Module specifiers imported by the file, side-effect imports included."""
    sources = [m.group("source") for m in _IMPORT_FROM_RE.finditer(source)]
    sources.extend(m.group("source") for m in _SIDE_EFFECT_IMPORT_RE.finditer(source))
    sources.extend(m.group("source") for m in _REQUIRE_RE.finditer(source))
    return list(dict.fromkeys(sources))


def exported_components(source: str) -> list[tuple[str, int]]:
    """(name, offset) of each capitalised export declaration."""
    return [(m.group("name"), m.start("name")) for m in _EXPORTED_COMPONENT_RE.finditer(source)]


def _opens_markup(source: str, offset: int) -> bool:
    idx = offset - 1
    while idx >= 0 and source[idx] in " \t\r\n":
        idx -= 1
    if idx < 0:
        return True
    prev = source[idx]
    if prev in ")]":
        return False
    if prev.isalnum() or prev in "_$":
        word_end = idx + 1
        while idx >= 0 and (source[idx].isalnum() or source[idx] in "_$"):
            idx -= 1
        return source[idx + 1:word_end] in _MARKUP_KEYWORDS
    return True


def _scan_tag(source: str, start: int) -> tuple[int, str, bool] | None:
    """Scan an opening tag's attribute section.

    Returns (end offset past ``>``, top-level attribute text with strings
    and expressions blanked, spread flag), or None if the tag never closes.
    """
    depth = 0
    quote = ""
    spread = False
    expr_start = -1
    top_level: list[str] = []
    limit = min(len(source), start + _MAX_TAG_LENGTH)
    i = start
    while i < limit:
        ch = source[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = ""
        elif ch in "\"'`":
            quote = ch
            if depth == 0:
                top_level.append(" ")
        elif ch == "{":
            if depth == 0:
                expr_start = i + 1
                top_level.append(" ")
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0 and source[expr_start:i].lstrip().startswith("..."):
                spread = True
            depth = max(depth, 0)
        elif depth == 0:
            if ch == ">":
                return i + 1, "".join(top_level), spread
            if ch == "<":
                return None
            top_level.append(ch)
        i += 1
    return None


def iter_elements(source: str) -> Iterator[Element]:
    """Yield every opening tag in source order."""
    for match in _TAG_OPEN_RE.finditer(source):
        if not _opens_markup(source, match.start()):
            continue
        scanned = _scan_tag(source, match.end())
        if scanned is None:
            continue
        end, text, spread = scanned
        stripped = text.rstrip()
        self_closing = stripped.endswith("/")
        attributes = tuple(_ATTRIBUTE_RE.findall(stripped.rstrip("/")))
        yield Element(
            name=match.group("name"),
            attributes=attributes,
            spread=spread,
            start=match.start(),
            end=end,
            self_closing=self_closing,
        )


def inner_markup(source: str, element: Element) -> str | None:
    """Text between an element's opening and closing tag, if found."""
    if element.self_closing:
        return ""
    close = source.find(f"</{element.name}", element.end)
    if close < 0:
        return None
    return source[element.end:close]


def has_visible_text(markup: str) -> bool:
    """True if markup contains text or an expression that may render text."""
    if "{" in markup:
        return True
    without_tags = re.sub(r"<[^>]*>", "", markup)
    return bool(without_tags.strip())
