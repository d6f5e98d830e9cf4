# visdom

A small HTML toolkit. It parses markup into a tree of nodes, even when the markup
is malformed. You can walk the tree, read and change attributes, text and markup,
and move nodes around.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Loading a document

```python
from visdom.document import load, load_catch

doc = load("<ul><li>Hello,</li><li>Vis</li><li>Dom</li></ul>")
root = doc.root()
print(root.outer_html())
```

`visdom.document.load(html, options=None)` parses the markup and returns a `Document`.
`options` is a `ParseOptions` from `visdom.parser`. When it is omitted,
`default_options()` is used, which turns on every repair:

- `auto_fix_unclosed_tag`
- `auto_fix_unexpected_endtag`
- `auto_fix_unescaped_lt`
- `allow_self_closing`

`load` raises `HtmlParseError` from `visdom.errors` when the markup is malformed in a
way the chosen options do not repair:

```python
from visdom.errors import HtmlParseError
from visdom.parser import ParseOptions

try:
    load("<html><aa></a></html>", ParseOptions())
except HtmlParseError as error:
    print(error)
```

`load_catch(html, handle, options=None)` never raises a parse error. It hands the
error to `handle` and returns an empty document instead. The same handler is then
bound to the document. Later operations that are refused, such as an invalid
insertion, call the handler with an `InvalidTraitMethodCall`. A document loaded with
`load` has no handler, so refused operations are silently ignored.

```python
errors = []
doc = load_catch("<html><aa></a></html>", errors.append, ParseOptions())
```

`visdom.parser.parse(html, options)` returns the root `Node` directly. The root is a
document when the markup has a doctype or a top-level `html` element. Otherwise it
is a document fragment.

## Documents

A `Document` gives access to its parts:

```python
doc = load("<!doctype html><html><head><title>Hi</title></head><body></body></html>")
doc.title()             # "Hi"
doc.head().tag_name()   # "HEAD"
doc.body()
doc.document_element()  # the <html> element
doc.get_element_by_id("main")
doc.source_code()       # the whole tree rendered back to html
```

`title`, `head`, `body`, `document_element` and `get_element_by_id` return `None`
when the element is not present. `trigger_error(error)` passes an error to the
bound handler, if there is one.

## Nodes

Every node is a `visdom.node.Node`. `node_type()` returns a `NodeType`, one of:

- `DOCUMENT`
- `DOCUMENT_FRAGMENT`
- `ELEMENT`
- `TEXT`
- `COMMENT`
- `CDATA`
- `DOCTYPE`
- `OTHER`

### Tree

- `parent()` and `root_element()` move up the tree.
- `child_nodes()` returns every child; `children()` returns element children only.
- `siblings()`, `next_element_sibling()`, `next_element_siblings()`,
  `previous_element_sibling()` and `previous_element_siblings()` return element siblings.
- `is_root_element()` and `is_same(other)` compare positions and identity.
- `owner_document()` returns the `Document` the node belongs to.
- `append_child(child)` attaches a node as the last child.

### Attributes

- `get_attribute(name)` returns an `AttrValue` from `visdom.values`, or `None`.
  Names are matched case-insensitively.
- An `AttrValue` has `is_true()` (a bare flag), `is_str(value)` and `to_list()`
  (whitespace split). `str()` of it gives the value.
- `set_attribute(name, value)` sets an attribute. With `value=None` it sets a bare
  flag attribute.
- `remove_attribute(name)` and `has_attribute(name)` remove and test attributes.

### Content

- `text()` returns the text with entities decoded.
- `text_chars()` returns the text as written in the source.
- `html()` / `inner_html()` and `outer_html()` render markup.
- `set_text(content)` replaces the content with text. On ordinary elements the text
  is entity-encoded. `script`, `style`, `textarea` and `title` keep it raw.
- `set_html(content)` parses and inserts markup. Called on a text node, it replaces
  that node.
- Void elements such as `img` accept no children. Content tags accept only text.

### Form values

`value()` returns a `FormValue` for `input`, `option`, `select` and `textarea`:

- `str()` of a `FormValue` joins the values of a multiple select with commas.
- Iterating it yields those values.
- `is_multiple()` tells the two kinds apart.

### Text nodes

- `texts(limit_depth)`, `texts_by(limit_depth, handle)` and
  `texts_by_rec(limit_depth, handle, rec_handle)` collect text nodes and content-tag
  elements. A depth of 0 means unlimited.
- Each collected node can be changed with `append_text`, `prepend_text`, `set_text`
  or `set_html`, or detached with `remove`.

### Mutation

- `insert_adjacent(position, node)` inserts a node relative to an element. `position`
  is an `InsertPosition`: `BEFORE_BEGIN`, `AFTER_BEGIN`, `BEFORE_END` or `AFTER_END`.
  A document fragment inserts its children.
- `replace_with(node)` puts a node in this node's place.
- `remove_child(child)` and `remove()` detach nodes.

```python
from visdom.values import InsertPosition

doc = load('<div class="parent"><div class="first"></div></div>')
parent = doc.root().children()[0]
extra = load('<div class="second"></div>').root()
parent.insert_adjacent(InsertPosition.BEFORE_END, extra)
print(parent.inner_html())
```

Some insertions are refused and reported to the document's error handler as an
`InvalidTraitMethodCall`:

- inserting a document;
- inserting a node into itself;
- inserting a node into one of its own descendants.

## What it does not do

There is no CSS selector engine and no collection type for query results. Nodes are
found by walking the tree with the methods above, or with `get_element_by_id` on a
`Document`.