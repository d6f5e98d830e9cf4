"""The document tree: nodes, attributes, rendering and mutation."""

from __future__ import annotations

import html as _html
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from visdom.errors import InvalidTraitMethodCall
from visdom.values import AttrValue, FormValue, InsertPosition

CONTENT_TAGS = frozenset({"script", "style", "textarea", "title"})
VOID_TAGS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
        "meta", "param", "source", "track", "wbr",
    }
)
_QUOTE_NEEDED = frozenset(" \t\n\f\r\"'=<>`")
_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


class NodeType(Enum):
    """The kind of a node in the tree."""

    DOCUMENT = "document"
    DOCUMENT_FRAGMENT = "document-fragment"
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    CDATA = "cdata"
    DOCTYPE = "doctype"
    OTHER = "other"


_ROOT_TYPES = (NodeType.DOCUMENT, NodeType.DOCUMENT_FRAGMENT)


def is_content_tag(name: str) -> bool:
    """Whether a tag keeps its content as raw text (script, style, ...)."""
    return name.lower() in CONTENT_TAGS


def allow_insert(tag_name: str, node_type: NodeType) -> bool:
    """Whether a node of ``node_type`` may become a child of ``tag_name``."""
    name = tag_name.lower()
    if name in VOID_TAGS:
        return False
    if name in CONTENT_TAGS:
        return node_type is NodeType.TEXT
    return True


def encode_text(content: str) -> str:
    """Encode the html special characters of a text."""
    return (
        content.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


@dataclass
class Attr:
    """One attribute of an element as written in the source."""

    key: str | None = None
    value: str | None = None
    quote: str | None = None
    need_quote: bool = False

    def render(self) -> str:
        if self.key is None:
            return ""
        if self.value is None:
            return f" {self.key}"
        quote = self.quote or ('"' if self.need_quote else "")
        return f" {self.key}={quote}{self.value}{quote}"


@dataclass
class RenderOptions:
    """How a node is turned back into a string."""

    inner_html: bool = False
    encode_content: bool = False
    decode_entity: bool = False


class Node:
    """A node of a parsed document."""

    def __init__(
        self,
        kind: NodeType,
        name: str = "",
        attrs: Iterable[Attr] | None = None,
        content: str | None = None,
        self_closing: bool = False,
    ) -> None:
        self.kind = kind
        self.name = name
        self.attrs: list[Attr] = list(attrs or [])
        self.content = content
        self.self_closing = self_closing
        self.nodes: list[Node] = []
        self._parent: Node | None = None
        self.index = 0
        self.document: object | None = None

    def __repr__(self) -> str:
        return f"Node({self.kind.name}, {self.name!r})"

    # ---- structure ----

    def append_child(self, child: Node) -> Node:
        """Attach ``child`` as the last child and return it."""
        if child._parent is not None:
            child._parent.remove_child(child)
        child._parent = self
        child.index = len(self.nodes)
        self.nodes.append(child)
        return child

    def node_type(self) -> NodeType:
        return self.kind

    def parent(self) -> Node | None:
        return self._parent

    def root_element(self) -> Node:
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def owner_document(self) -> object | None:
        return self.root_element().document

    def is_root_element(self) -> bool:
        return self.kind in _ROOT_TYPES

    def is_same(self, other: Node | None) -> bool:
        return self is other

    def _lc_name(self) -> str:
        return self.name.lower() if self.kind is NodeType.ELEMENT else ""

    def tag_name(self) -> str:
        """The upper case tag name; root nodes have an empty name."""
        if self.kind is NodeType.ELEMENT:
            if self.name:
                return self.name.upper()
            self.halt("tag_name", "Html syntax error: not found a tag name.")
        elif self.kind not in _ROOT_TYPES:
            self.halt(
                "tag_name",
                f"The node type of '{self.kind.name}' doesn't have a tag name.",
            )
        return ""

    def child_nodes(self) -> list[Node]:
        return list(self.nodes)

    def children(self) -> list[Node]:
        return [n for n in self.nodes if n.kind is NodeType.ELEMENT]

    def _sibling_nodes(self) -> list[Node]:
        return self._parent.nodes if self._parent is not None else []

    def next_element_sibling(self) -> Node | None:
        following = self._sibling_nodes()[self.index + 1:]
        return next((n for n in following if n.kind is NodeType.ELEMENT), None)

    def next_element_siblings(self) -> list[Node]:
        following = self._sibling_nodes()[self.index + 1:]
        return [n for n in following if n.kind is NodeType.ELEMENT]

    def previous_element_sibling(self) -> Node | None:
        before = self._sibling_nodes()[: self.index]
        return next(
            (n for n in reversed(before) if n.kind is NodeType.ELEMENT), None
        )

    def previous_element_siblings(self) -> list[Node]:
        before = self._sibling_nodes()[: self.index]
        return [n for n in before if n.kind is NodeType.ELEMENT]

    def siblings(self) -> list[Node]:
        return [
            n
            for n in self._sibling_nodes()
            if n.kind is NodeType.ELEMENT and n is not self
        ]

    # ---- attributes ----

    def _find_attr(self, name: str) -> Attr | None:
        lc_name = name.lower()
        return next(
            (a for a in self.attrs if a.key is not None and a.key.lower() == lc_name),
            None,
        )

    def get_attribute(self, name: str) -> AttrValue | None:
        """The first attribute with this name, compared case-insensitively."""
        attr = self._find_attr(name)
        if attr is None:
            return None
        return AttrValue(attr.value, attr.quote if attr.value is not None else None)

    def set_attribute(self, name: str, value: str | None = None) -> None:
        need_quote = False
        quote = '"'
        encoded: str | None = None
        if value is not None:
            found_quote = False
            out = []
            for ch in value:
                need_quote = need_quote or ch in _QUOTE_NEEDED
                if ch in _QUOTE_ENTITIES:
                    if found_quote:
                        out.append(_QUOTE_ENTITIES[ch] if ch == quote else ch)
                    else:
                        found_quote = True
                        if ch == '"':
                            quote = "'"
                        out.append(ch)
                else:
                    out.append(ch)
            encoded = "".join(out)
        attr = self._find_attr(name)
        final_quote = quote if encoded is not None else None
        if attr is not None:
            attr.value = encoded
            attr.quote = final_quote
            attr.need_quote = need_quote
            return
        self.attrs.append(Attr(name, encoded, final_quote, need_quote))

    def remove_attribute(self, name: str) -> None:
        lc_name = name.lower()
        self.attrs = [
            a for a in self.attrs if a.key is None or a.key.lower() != lc_name
        ]

    def has_attribute(self, name: str) -> bool:
        return self._find_attr(name) is not None

    def value(self) -> FormValue:
        """The value of a form control, as a browser would report it."""
        name = self._lc_name()
        if name in ("input", "option"):
            attr = self.get_attribute("value")
            return FormValue(attr.value if attr and attr.value is not None else "")
        if name == "select":
            return self._select_value()
        if name == "textarea":
            return FormValue(self.text())
        return FormValue("")

    def _select_value(self) -> FormValue:
        multiple = self.has_attribute("multiple")
        values: list[str] = []
        default: list[str] = []

        def option_value(option: Node) -> str:
            attr = option.get_attribute("value")
            return attr.value if attr and attr.value is not None else ""

        def collect(parent: Node, level: int) -> None:
            for child in parent.children():
                if child._lc_name() == "option":
                    selected = child.has_attribute("selected")
                    if selected:
                        values.append(option_value(child))
                        if not multiple:
                            break
                    elif not default and level == 0:
                        default.append(option_value(child))
                else:
                    collect(child, level + 1)

        collect(self, 0)
        if multiple:
            return FormValue(tuple(values))
        if values:
            return FormValue(values[0])
        return FormValue(default[0] if default else "")

    # ---- rendering ----

    def build(self, options: RenderOptions, inner_text: bool) -> str:
        """Render the node as html, or as text when ``inner_text`` is true."""
        return self._render(options, inner_text, True)

    def _render(self, options: RenderOptions, text_mode: bool, top: bool) -> str:
        content = self.content or ""
        kind = self.kind
        if kind is NodeType.TEXT:
            if options.decode_entity:
                return _html.unescape(content)
            return content
        if kind is NodeType.COMMENT:
            if text_mode:
                return content if top else ""
            return f"<!--{content}-->"
        if kind is NodeType.CDATA:
            return content if text_mode else f"<![CDATA[{content}]]>"
        if kind is NodeType.DOCTYPE:
            return "" if text_mode else f"<!{content}>"
        inner_parts = [n._render(options, text_mode, False) for n in self.nodes]
        if kind is not NodeType.ELEMENT:
            return "".join(inner_parts)
        if self.content is not None and is_content_tag(self.name):
            inner = self.content
        else:
            inner = "".join(inner_parts)
        if text_mode or (top and options.inner_html):
            return inner
        attrs = "".join(a.render() for a in self.attrs)
        if self.self_closing and not inner:
            return f"<{self.name}{attrs} />"
        if self._lc_name() in VOID_TAGS:
            return f"<{self.name}{attrs}>"
        return f"<{self.name}{attrs}>{inner}</{self.name}>"

    def text(self) -> str:
        """The text content, with entities decoded."""
        return self.build(
            RenderOptions(decode_entity=True),
            self.kind in (NodeType.ELEMENT, NodeType.COMMENT),
        )

    def text_chars(self) -> str:
        """The text content as written in the source."""
        return self.build(RenderOptions(), self.kind is NodeType.ELEMENT)

    def html(self) -> str:
        return self.inner_html()

    def inner_html(self) -> str:
        return self.build(RenderOptions(inner_html=True, encode_content=True), False)

    def outer_html(self) -> str:
        return self.build(RenderOptions(encode_content=True), False)

    # ---- errors ----

    def halt(self, method: str, message: str) -> None:
        """Report an invalid call to the owner document's error handler."""
        document = self.owner_document()
        if document is not None:
            document.trigger_error(InvalidTraitMethodCall(method, message))

    # ---- content mutation ----

    def _set_children(self, nodes: list[Node]) -> None:
        for old in self.nodes:
            old._parent = None
        for position, node in enumerate(nodes):
            node._parent = self
            node.index = position
        self.nodes = nodes

    def set_text(self, content: str) -> None:
        """Replace the content with text; html special characters are encoded."""
        if self.kind is NodeType.ELEMENT:
            if is_content_tag(self.name):
                self.content = content or None
            elif content:
                self._set_children([Node(NodeType.TEXT, content=encode_text(content))])
            else:
                self._set_children([])
        elif self.kind in (NodeType.TEXT, NodeType.COMMENT):
            if not content:
                self.halt(
                    "set_text",
                    "the text parameter can't be empty, if you want to remove a "
                    "text node, you can use 'remove' method instead.",
                )
            else:
                self.content = content

    def set_html(self, content: str) -> None:
        """Replace the content with parsed html; a text node replaces itself."""
        if self.kind is NodeType.ELEMENT:
            target, is_element = self, True
        elif self.kind is NodeType.TEXT and self._parent is not None:
            target, is_element = self._parent, False
        else:
            return
        if is_content_tag(target._lc_name()):
            target.content = content
            return
        from visdom.parser import default_options, parse

        fragment = parse(content, default_options())
        nodes = [
            n for n in fragment.nodes if allow_insert(target._lc_name(), n.kind)
        ]
        fragment.nodes = []
        if is_element:
            target._set_children(nodes)
            return
        index = self.index
        self._parent = None
        for node in nodes:
            node._parent = target
        target.nodes[index:index + 1] = nodes
        _reindex(target.nodes)

    def remove_child(self, child: Node) -> None:
        if child._parent is not self:
            return
        del self.nodes[child.index]
        child._parent = None
        _reindex(self.nodes)

    def remove(self) -> None:
        """Detach the node from its parent."""
        if self._parent is not None:
            self._parent.remove_child(self)

    def append_text(self, content: str) -> None:
        self.content = (self.content or "") + content

    def prepend_text(self, content: str) -> None:
        self.content = content + (self.content or "")

    def _validate_change(self, node: Node, method: str) -> bool:
        if self.kind is not NodeType.ELEMENT:
            self.halt(method, f"Can't {method} for a {self.kind.name} type")
            return False
        if node.kind is NodeType.DOCUMENT:
            self.halt(method, f"Can't {method} a document type")
            return False
        if node is self:
            self.halt(method, f"Can't {method} a dom that contains itself.")
            return False
        ancestor = self._parent
        while ancestor is not None:
            if ancestor is node:
                self.halt(method, f"Can't {method} a dom that contains it's parent")
                return False
            ancestor = ancestor._parent
        return True

    @staticmethod
    def _take_nodes(node: Node) -> list[Node]:
        if node.kind is NodeType.DOCUMENT_FRAGMENT:
            nodes = list(node.nodes)
            node.nodes = []
            for taken in nodes:
                taken._parent = None
            return nodes
        node.remove()
        return [node]

    def insert_adjacent(self, position: InsertPosition, node: Node) -> None:
        """Insert ``node`` (or a fragment's children) relative to this element."""
        if not self._validate_change(node, position.action()):
            return
        nodes = self._take_nodes(node)
        inside = position in (InsertPosition.AFTER_BEGIN, InsertPosition.BEFORE_END)
        if inside:
            nodes = [n for n in nodes if allow_insert(self._lc_name(), n.kind)]
        if not nodes:
            return
        if inside:
            container, at = self, (
                0 if position is InsertPosition.AFTER_BEGIN else len(self.nodes)
            )
        else:
            if self._parent is None:
                return
            container = self._parent
            at = self.index + (1 if position is InsertPosition.AFTER_END else 0)
        for inserted in nodes:
            inserted._parent = container
        container.nodes[at:at] = nodes
        _reindex(container.nodes)

    def replace_with(self, node: Node) -> Node | None:
        """Put ``node`` in this node's place; returns the single replacement."""
        nodes = self._take_nodes(node)
        if not nodes:
            return None
        replacement = nodes[0] if len(nodes) == 1 else None
        parent = self._parent
        if parent is not None:
            index = self.index
            self._parent = None
            for inserted in nodes:
                inserted._parent = parent
            parent.nodes[index:index + 1] = nodes
            _reindex(parent.nodes)
        return replacement

    # ---- text nodes ----

    def texts(self, limit_depth: int = 0) -> list[Node]:
        return self.texts_by(limit_depth, lambda _depth, _node: True)

    def texts_by(
        self, limit_depth: int, handle: Callable[[int, Node], bool]
    ) -> list[Node]:
        return self.texts_by_rec(limit_depth, handle, lambda _ele: True)

    def texts_by_rec(
        self,
        limit_depth: int,
        handle: Callable[[int, Node], bool],
        rec_handle: Callable[[Node], bool],
    ) -> list[Node]:
        """Collect text nodes and content-tag elements below this element.

        ``limit_depth`` of 0 means no limit; ``handle`` decides which nodes
        are kept and ``rec_handle`` which elements are descended into.
        """
        limit = limit_depth or float("inf")
        result: list[Node] = []

        def walk(ele: Node, depth: int) -> None:
            if ele.nodes:
                next_depth = depth + 1
                recursive = next_depth < limit
                for node in list(ele.nodes):
                    if node.kind is NodeType.TEXT:
                        if handle(depth, node):
                            result.append(node)
                    elif node.kind is NodeType.ELEMENT:
                        if is_content_tag(node.name):
                            if handle(depth, node):
                                result.append(node)
                        elif recursive and rec_handle(node):
                            walk(node, next_depth)
            elif is_content_tag(ele._lc_name()) and handle(depth, ele):
                result.append(ele)

        walk(self, 0)
        return result


def _reindex(nodes: list[Node]) -> None:
    for position, node in enumerate(nodes):
        node.index = position