"""A forgiving html parser that builds a tree of nodes."""

from __future__ import annotations

import re
from dataclasses import dataclass

from visdom.errors import HtmlParseError
from visdom.node import CONTENT_TAGS, VOID_TAGS, Attr, Node, NodeType

_TAG_NAME = re.compile(r"[^\s/>]+")
_ATTR_KEY = re.compile(r"[^\s/>][^\s/>=]*")
_UNQUOTED_VALUE = re.compile(r"[^\s>]+")
_WHITESPACE = re.compile(r"\s*")
_END_TAG = re.compile(r"</([^\s/>]+)[^>]*>")
_RAW_TEXT_END = {
    tag: re.compile(rf"</{re.escape(tag)}\s*>", re.IGNORECASE) for tag in CONTENT_TAGS
}


@dataclass
class ParseOptions:
    """Which kinds of malformed html the parser repairs instead of failing."""

    auto_fix_unclosed_tag: bool = False
    auto_fix_unexpected_endtag: bool = False
    auto_fix_unescaped_lt: bool = False
    allow_self_closing: bool = False


def default_options() -> ParseOptions:
    """The most compatible options: every repair is switched on."""
    return ParseOptions(
        auto_fix_unclosed_tag=True,
        auto_fix_unexpected_endtag=True,
        auto_fix_unescaped_lt=True,
        allow_self_closing=True,
    )


def parse(html: str, options: ParseOptions | None = None) -> Node:
    """Parse ``html`` and return the root node of the tree.

    The root is a document when the source has a doctype or a top level
    ``html`` element, and a document fragment otherwise.
    Raises :class:`HtmlParseError` for malformed html the options don't repair.
    """
    return _Parser(html, options if options is not None else default_options()).run()


def _marks_document(node: Node) -> bool:
    if node.kind is NodeType.DOCTYPE:
        return True
    return node.kind is NodeType.ELEMENT and node.name.lower() == "html"


class _Parser:
    def __init__(self, source: str, options: ParseOptions) -> None:
        self.source = source
        self.options = options
        self.pos = 0
        self.root = Node(NodeType.DOCUMENT_FRAGMENT)
        self.stack: list[Node] = [self.root]
        self.pending: list[str] = []

    def run(self) -> Node:
        source = self.source
        while self.pos < len(source):
            lt = source.find("<", self.pos)
            if lt < 0:
                self.pending.append(source[self.pos:])
                break
            if lt > self.pos:
                self.pending.append(source[self.pos:lt])
            self.pos = lt
            self._markup()
        self._flush_text()
        if len(self.stack) > 1 and not self.options.auto_fix_unclosed_tag:
            raise HtmlParseError(f"unclosed tag '<{self.stack[-1].name}>'", len(source))
        if any(_marks_document(node) for node in self.root.nodes):
            self.root.kind = NodeType.DOCUMENT
        return self.root

    # ---- helpers ----

    def _flush_text(self) -> None:
        if self.pending:
            text = "".join(self.pending)
            self.pending = []
            self.stack[-1].append_child(Node(NodeType.TEXT, content=text))

    def _add(self, node: Node) -> None:
        self._flush_text()
        self.stack[-1].append_child(node)

    def _literal_lt(self, message: str) -> None:
        if not self.options.auto_fix_unescaped_lt:
            raise HtmlParseError(message, self.pos)
        self.pending.append("<")
        self.pos += 1

    # ---- markup ----

    def _markup(self) -> None:
        source, pos = self.source, self.pos
        following = source[pos + 1:pos + 2]
        if source.startswith("<!--", pos):
            self._delimited(NodeType.COMMENT, pos + 4, "-->", "comment")
        elif source.startswith("<![CDATA[", pos):
            self._delimited(NodeType.CDATA, pos + 9, "]]>", "cdata section")
        elif source[pos:pos + 9].lower() == "<!doctype":
            self._delimited(NodeType.DOCTYPE, pos + 2, ">", "doctype")
        elif following == "/" and source[pos + 2:pos + 3].isalpha():
            self._end_tag()
        elif following.isalpha():
            self._start_tag()
        else:
            self._literal_lt("unescaped '<' in text")

    def _delimited(self, kind: NodeType, start: int, end_mark: str, what: str) -> None:
        end = self.source.find(end_mark, start)
        if end < 0:
            if not self.options.auto_fix_unclosed_tag:
                raise HtmlParseError(f"unclosed {what}", self.pos)
            content = self.source[start:]
            self.pos = len(self.source)
        else:
            content = self.source[start:end]
            self.pos = end + len(end_mark)
        self._add(Node(kind, content=content))

    def _end_tag(self) -> None:
        start = self.pos
        match = _END_TAG.match(self.source, start)
        if match is None:
            self._literal_lt("unclosed end tag")
            return
        self.pos = match.end()
        self._flush_text()
        name = match.group(1)
        lc_name = name.lower()
        stack = self.stack
        depth = next(
            (d for d in range(len(stack) - 1, 0, -1) if stack[d].name.lower() == lc_name),
            0,
        )
        if depth == 0:
            if not self.options.auto_fix_unexpected_endtag:
                raise HtmlParseError(f"unexpected end tag '</{name}>'", start)
            return
        if depth < len(stack) - 1 and not self.options.auto_fix_unclosed_tag:
            raise HtmlParseError(f"unclosed tag '<{stack[-1].name}>'", start)
        del stack[depth:]

    def _start_tag(self) -> None:
        start = self.pos
        tag = self._read_tag(start)
        if tag is None:
            self._literal_lt("unclosed start tag")
            return
        name, attrs, self_closing, end = tag
        lc_name = name.lower()
        if self_closing and lc_name not in VOID_TAGS and not self.options.allow_self_closing:
            raise HtmlParseError(f"self-closing tag '<{name} />' is not allowed", start)
        self.pos = end
        node = Node(NodeType.ELEMENT, name, attrs, self_closing=self_closing)
        self._add(node)
        if self_closing or lc_name in VOID_TAGS:
            return
        if lc_name in CONTENT_TAGS:
            node.content = self._raw_text(name, start)
        else:
            self.stack.append(node)

    def _read_tag(self, start: int) -> tuple[str, list[Attr], bool, int] | None:
        source = self.source
        name_match = _TAG_NAME.match(source, start + 1)
        name = name_match.group()
        pos = name_match.end()
        attrs: list[Attr] = []
        while True:
            pos = _WHITESPACE.match(source, pos).end()
            if pos >= len(source):
                return None
            if source.startswith("/>", pos):
                return name, attrs, True, pos + 2
            char = source[pos]
            if char == ">":
                return name, attrs, False, pos + 1
            if char == "/":
                pos += 1
                continue
            key_match = _ATTR_KEY.match(source, pos)
            key = key_match.group()
            pos = key_match.end()
            after = _WHITESPACE.match(source, pos).end()
            if not source.startswith("=", after):
                attrs.append(Attr(key))
                continue
            pos = _WHITESPACE.match(source, after + 1).end()
            read = self._attr_value(key, pos)
            if read is None:
                return None
            attr, pos = read
            attrs.append(attr)

    def _attr_value(self, key: str, pos: int) -> tuple[Attr, int] | None:
        source = self.source
        if pos >= len(source):
            return None
        quote = source[pos]
        if quote in "\"'":
            end = source.find(quote, pos + 1)
            if end < 0:
                return None
            return Attr(key, source[pos + 1:end], quote), end + 1
        match = _UNQUOTED_VALUE.match(source, pos)
        if match is None:
            return Attr(key, "", '"'), pos
        return Attr(key, match.group()), match.end()

    def _raw_text(self, name: str, start: int) -> str:
        source = self.source
        match = _RAW_TEXT_END[name.lower()].search(source, self.pos)
        if match is None:
            if not self.options.auto_fix_unclosed_tag:
                raise HtmlParseError(f"unclosed tag '<{name}>'", start)
            content = source[self.pos:]
            self.pos = len(source)
            return content
        content = source[self.pos:match.start()]
        self.pos = match.end()
        return content