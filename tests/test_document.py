import pytest

from visdom.document import Document, load, load_catch
from visdom.errors import HtmlParseError, InvalidTraitMethodCall
from visdom.node import Node, NodeType
from visdom.parser import ParseOptions
from visdom.values import InsertPosition

PAGE_TITLE = "Vis<dom>"
PAGE = f"""
    <!doctype html>
    <html>
      <head>
        <title>{PAGE_TITLE}</title>
      </head>
      <body>
        Visdom!
      </body>
    </html>
  """

WRONG_HTML = """
  <!doctype html>
  <html>
    <head></head>
    <aa></a>
  </html>
  """


def _elements(node):
    for child in node.child_nodes():
        if child.node_type() is NodeType.ELEMENT:
            yield child
            yield from _elements(child)


def _find_class(node, name):
    return next(
        e
        for e in _elements(node)
        if (attr := e.get_attribute("class")) is not None and name in attr.to_list()
    )


def test_document_trait():
    doc = load(PAGE)
    assert doc.title() == PAGE_TITLE
    head = doc.head()
    titles = [c for c in head.children() if c.tag_name() == "TITLE"]
    assert titles[0].text() == PAGE_TITLE
    body = doc.body()
    assert body.previous_element_sibling().tag_name() == "HEAD"
    assert doc.source_code() == PAGE
    assert doc.document_element().tag_name() == "HTML"


def test_document_fragment_has_no_parts():
    doc = load("<div>just a document fragement</div>")
    assert doc.root().node_type() is NodeType.DOCUMENT_FRAGMENT
    assert doc.title() is None
    assert doc.head() is None
    assert doc.document_element() is None
    assert doc.body() is None


def test_get_element_by_id():
    doc = load('<div id="a"><p id="b">x</p></div>')
    assert doc.get_element_by_id("b").tag_name() == "P"
    assert doc.get_element_by_id("missing") is None


def test_node_trait():
    doc = load('<html><body><div id="content">Vis<span>dom</span></div></body></html>')
    root = doc.root()
    content = doc.get_element_by_id("content")
    assert content.root_element() is root
    assert root.root_element() is root
    assert content.owner_document() is doc
    assert root.is_root_element()


def test_text_trait():
    html = """
    <!doctype html>
    <html>
      <head><title>test text trait</title></head>
      <body><div id="content">Vis<span>dom</span></div></body>
    </html>
  """
    doc = load(html)
    content = doc.get_element_by_id("content")
    texts = content.texts(0)
    assert [t.text() for t in texts] == ["Vis", "dom"]
    for node in texts:
        node.prepend_text("^")
        node.append_text("$")
    assert [t.text() for t in texts] == ["^Vis$", "^dom$"]
    for node in texts:
        node.remove()
    assert content.texts(0) == []


@pytest.mark.parametrize("tag", ["script", "style"])
def test_content_tag_text_editing(tag):
    doc = load(f"<{tag}></{tag}>")
    texts = doc.root().children()[0].texts(1)
    assert len(texts) == 1
    assert texts[0].text() == ""
    texts[0].append_text("{}")
    texts[0].prepend_text("body")
    assert texts[0].text() == "body{}"


def test_append_child():
    doc = load('<div class="parent"><div class="first-child"></div></div>')
    parent = _find_class(doc.root(), "parent")
    first_child = _find_class(parent, "first-child")
    new_childs = load('<div class="second-child"></div><div class="third-child"></div>')
    assert first_child.index == 0
    parent.insert_adjacent(InsertPosition.BEFORE_END, new_childs.root())
    assert first_child.index == 0
    assert parent.children()[-1].index == 2
    parent.insert_adjacent(InsertPosition.BEFORE_END, load("").root())
    assert parent.children()[-1].index == 2
    assert len(parent.children()) == 3


def test_prepend_child():
    doc = load('<div class="parent"><div class="third-child"></div></div>')
    parent = _find_class(doc.root(), "parent")
    last_child = _find_class(parent, "third-child")
    new_childs = load('<div class="first-child"></div><div class="second-child"></div>')
    assert last_child.index == 0
    parent.insert_adjacent(InsertPosition.AFTER_BEGIN, new_childs.root())
    assert last_child.index == 2
    assert parent.children()[0].index == 0


def test_insert_before():
    doc = load('<div class="parent"><div class="third-child"></div></div>')
    third_child = _find_class(doc.root(), "third-child")
    inserted = load('<div class="first-child"></div><div class="second-child"></div>')
    first_child = _find_class(inserted.root(), "first-child")
    second_child = _find_class(inserted.root(), "second-child")
    third_child.insert_adjacent(InsertPosition.BEFORE_BEGIN, second_child)
    assert third_child.index == 1
    assert second_child.index == 0
    assert len(inserted.root().children()) == 1
    second_child.insert_adjacent(InsertPosition.BEFORE_BEGIN, first_child)
    assert (first_child.index, second_child.index, third_child.index) == (0, 1, 2)
    assert inserted.root().children() == []


def test_insert_after():
    doc = load('<div class="parent"><div class="first-child"></div></div>')
    first_child = _find_class(doc.root(), "first-child")
    inserted = load('<div class="second-child"></div><div class="third-child"></div>')
    second_child = _find_class(inserted.root(), "second-child")
    third_child = _find_class(inserted.root(), "third-child")
    first_child.insert_adjacent(InsertPosition.AFTER_END, second_child)
    assert first_child.index == 0
    assert second_child.index == 1
    assert len(inserted.root().children()) == 1
    second_child.insert_adjacent(InsertPosition.AFTER_END, third_child)
    assert (first_child.index, second_child.index, third_child.index) == (0, 1, 2)
    assert inserted.root().children() == []


def test_empty_content():
    doc = load('<div id="content">This is a <strong>test</strong>!</div>')
    content = doc.get_element_by_id("content")
    assert len(content.children()) == 1
    content.set_text("")
    assert content.children() == []
    assert content.html() == ""


def test_allow_insert():
    doc = load('<div id="content"><img src="picture.jpg" /></div>')
    img = doc.get_element_by_id("content").children()[0]
    img.set_html("<div class='test'></div>")
    assert img.html() == ""
    img.insert_adjacent(
        InsertPosition.BEFORE_END, load("abc<span>def</span><!--ghi-->").root()
    )
    assert img.html() == ""
    title = load("<title></title>").root().children()[0]
    title.set_html("ab<span></span>cd")
    assert title.text() == "ab<span></span>cd"
    title.set_text("")
    title.insert_adjacent(InsertPosition.BEFORE_END, load("ab<span></span>cd").root())
    assert title.text() == "abcd"
    doc = load('<div id="wrapper"><div id="inner"></div></div>')
    wrapper = doc.get_element_by_id("wrapper")
    inner = doc.get_element_by_id("inner")
    inner.insert_adjacent(InsertPosition.BEFORE_END, wrapper)
    assert inner.parent() is wrapper
    assert wrapper.children() == [inner]


MAIN_PAGE = """
  <!doctype html>
  <html>
    <head></head>
    <body>
      <div id="main">
        <div id="container"></div>
      </div>
    </body>
  </html>"""


def _catching_document():
    errors = []
    return load_catch(MAIN_PAGE, errors.append), errors


def test_append_wrong_document():
    doc, errors = _catching_document()
    doc.get_element_by_id("main").insert_adjacent(InsertPosition.BEFORE_END, doc.root())
    assert len(errors) == 1
    assert isinstance(errors[0], InvalidTraitMethodCall)
    assert str(errors[0]) == "Call method 'append' cause an error: Can't append a document type"


def test_append_wrong_itself():
    doc, errors = _catching_document()
    main = doc.get_element_by_id("main")
    main.insert_adjacent(InsertPosition.BEFORE_END, main)
    assert [e.message for e in errors] == ["Can't append a dom that contains itself."]


def test_append_wrong_parent():
    doc, errors = _catching_document()
    container = doc.get_element_by_id("container")
    container.insert_adjacent(InsertPosition.BEFORE_END, doc.get_element_by_id("main"))
    assert [e.message for e in errors] == ["Can't append a dom that contains it's parent"]
    assert container.children() == []


IMAGES = """
  <div>
      <img src="a.png" />
      <img src="b.jpg" />
      <img src="c.webp" />
  </div>
  """


def _images(doc):
    return [e for e in _elements(doc.root()) if e.tag_name() == "IMG"]


def test_insert_svg_and_remove_png():
    doc = load(IMAGES)
    for img in _images(doc):
        if str(img.get_attribute("src")).endswith(".png"):
            img.insert_adjacent(InsertPosition.BEFORE_BEGIN, load("<svg></svg>").root())
            img.remove()
    assert len(_images(doc)) == 2
    assert [e.tag_name() for e in _elements(doc.root())].count("SVG") == 1


def test_replace_png_with_svg():
    doc = load(IMAGES)
    for img in _images(doc):
        if str(img.get_attribute("src")).endswith(".png"):
            replacement = img.replace_with(load("<svg></svg>").root())
            assert replacement.tag_name() == "SVG"
    assert len(_images(doc)) == 2
    assert [e.tag_name() for e in _elements(doc.root())].count("SVG") == 1


def test_wrong_html_raises():
    with pytest.raises(HtmlParseError):
        load(WRONG_HTML, ParseOptions())


def test_wrong_html_catch():
    errors = []
    doc = load_catch(WRONG_HTML, errors.append, ParseOptions())
    assert len(errors) == 1
    assert isinstance(errors[0], HtmlParseError)
    assert doc.root().child_nodes() == []


def test_trigger_error_calls_handler():
    errors = []
    doc = Document(Node(NodeType.DOCUMENT_FRAGMENT), onerror=errors.append)
    error = InvalidTraitMethodCall("x", "y")
    doc.trigger_error(error)
    assert errors == [error]