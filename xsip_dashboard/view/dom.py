"""
In-process document model for the dashboard page.

Elements carry an id, a tag, an ordered class list, attributes and either
children, raw inner markup or plain text. Renderers only ever write into
this model; the web layer serializes it for the browser.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from xsip_dashboard.view.escape import escape

# Elements serialized without a closing tag
_VOID_TAGS = frozenset({"input", "br", "hr", "img", "meta", "link"})


class Element:
    """A node in the dashboard document."""

    def __init__(
        self,
        tag: str = "div",
        element_id: str | None = None,
        *,
        classes: Iterable[str] = (),
        attrs: dict[str, str] | None = None,
        text: str = "",
        children: Iterable[Element] = (),
    ) -> None:
        self.tag = tag
        self.id = element_id
        self.classes: list[str] = []
        for name in classes:
            self.add_class(name)
        self.attrs: dict[str, str] = dict(attrs or {})
        self.text = text
        self.children: list[Element] = []
        self._markup: str | None = None
        # Counts forced style recalculations; see force_reflow()
        self.reflow_count = 0
        for child in children:
            self.append(child)

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, {self.id!r}, classes={self.classes!r})"

    # -- classes -------------------------------------------------------------

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def remove_class(self, name: str) -> None:
        if name in self.classes:
            self.classes.remove(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def force_reflow(self) -> None:
        """Stand-in for reading layout between class changes.

        Removing and re-adding a class with a reflow in between makes the
        browser replay the enter transition.
        """
        self.reflow_count += 1

    # -- content -------------------------------------------------------------

    def set_text(self, value: object) -> None:
        """Replace all content with plain text (escaped on output)."""
        self.children = []
        self._markup = None
        self.text = str(value)

    def set_markup(self, markup: str) -> None:
        """Replace all content with pre-escaped markup."""
        self.children = []
        self.text = ""
        self._markup = markup

    def replace_children(self, children: Iterable[Element]) -> None:
        """Drop every existing child and install ``children`` in order.

        There is no diffing: the container afterwards holds exactly the
        given nodes, whatever it held before.
        """
        self.text = ""
        self._markup = None
        self.children = []
        for child in children:
            self.append(child)

    def append(self, child: Element) -> None:
        self._markup = None
        self.children.append(child)

    def reset(self) -> None:
        """Clear the value of every input below this element (form reset)."""
        for node in self.walk():
            if node.tag == "input" and node.attrs.get("type") != "submit":
                node.attrs["value"] = ""

    # -- traversal -----------------------------------------------------------

    def walk(self) -> Iterator[Element]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, element_id: str) -> Element | None:
        for node in self.walk():
            if node.id == element_id:
                return node
        return None

    # -- serialization -------------------------------------------------------

    def inner_html(self) -> str:
        if self._markup is not None:
            return self._markup
        if self.children:
            return "".join(child.to_html() for child in self.children)
        return escape(self.text)

    def to_html(self) -> str:
        parts = [self.tag]
        if self.id:
            parts.append(f'id="{escape(self.id)}"')
        if self.classes:
            parts.append(f'class="{escape(" ".join(self.classes))}"')
        for key, value in self.attrs.items():
            parts.append(f'{key}="{escape(value)}"')
        opening = "<" + " ".join(parts) + ">"
        if self.tag in _VOID_TAGS:
            return opening
        return f"{opening}{self.inner_html()}</{self.tag}>"


class Document:
    """The dashboard page: a root element plus id and class lookups."""

    def __init__(self, root: Element) -> None:
        self.root = root

    def get(self, element_id: str) -> Element | None:
        return self.root.find(element_id)

    def require(self, element_id: str) -> Element:
        element = self.get(element_id)
        if element is None:
            raise KeyError(f"No element with id {element_id!r}")
        return element

    def query_class(self, name: str) -> list[Element]:
        return [node for node in self.root.walk() if node.has_class(name)]

    def set_text(self, element_id: str, value: object) -> None:
        """Set an element's text if the element exists."""
        element = self.get(element_id)
        if element is not None:
            element.set_text(value)

    def text_of(self, element_id: str) -> str:
        return self.require(element_id).text

    def to_html(self) -> str:
        return self.root.to_html()
