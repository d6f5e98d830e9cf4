"""Parsed documents and the functions that load them."""

from __future__ import annotations

from typing import Callable, Iterator

from visdom.errors import HtmlParseError, VisdomError
from visdom.node import Node, NodeType, RenderOptions
from visdom.parser import ParseOptions, default_options, parse

ErrorHandler = Callable[[VisdomError], None]


def _descendant_elements(node: Node) -> Iterator[Node]:
    """Elements below ``node`` in document order, ``node`` itself excluded."""
    stack = list(reversed(node.nodes))
    while stack:
        current = stack.pop()
        if current.kind is NodeType.ELEMENT:
            yield current
            stack.extend(reversed(current.nodes))


def _first_named(node: Node, name: str) -> Node | None:
    return next((e for e in _descendant_elements(node) if e.name.lower() == name), None)


class Document:
    """A parsed document, owning its root node and an optional error handler."""

    def __init__(self, root: Node, onerror: ErrorHandler | None = None) -> None:
        self._root = root
        self.onerror = onerror
        root.document = self

    def root(self) -> Node:
        """The root node: a document or a document fragment."""
        return self._root

    def get_element_by_id(self, id: str) -> Node | None:
        for element in _descendant_elements(self._root):
            attr = element.get_attribute("id")
            if attr is not None and attr.is_str(id):
                return element
        return None

    def source_code(self) -> str:
        """The whole document rendered back to html."""
        return self._root.build(RenderOptions(), False)

    def document_element(self) -> Node | None:
        """The ``html`` element, if there is one."""
        return _first_named(self._root, "html")

    def title(self) -> str | None:
        """The text of the titles in the first ``head``, or None."""
        head = self.head()
        if head is None:
            return None
        titles = [e for e in _descendant_elements(head) if e.name.lower() == "title"]
        if not titles:
            return None
        return "".join(title.text() for title in titles)

    def head(self) -> Node | None:
        return _first_named(self._root, "head")

    def body(self) -> Node | None:
        return _first_named(self._root, "body")

    def trigger_error(self, error: VisdomError) -> None:
        """Pass ``error`` to the error handler, if one is bound."""
        if self.onerror is not None:
            self.onerror(error)


def load(html: str, options: ParseOptions | None = None) -> Document:
    """Parse ``html`` into a document; raises :class:`HtmlParseError`."""
    return Document(parse(html, options if options is not None else default_options()))


def load_catch(
    html: str, handle: ErrorHandler, options: ParseOptions | None = None
) -> Document:
    """Parse ``html``, sending every error to ``handle`` instead of raising.

    When the html can't be parsed the handler receives the parse error and
    an empty document is returned.
    """
    try:
        root = parse(html, options if options is not None else default_options())
    except HtmlParseError as error:
        handle(error)
        return Document(Node(NodeType.DOCUMENT_FRAGMENT), onerror=handle)
    return Document(root, onerror=handle)