"""Adapter exposing a BeautifulSoup tree through the document protocols."""

from collections.abc import Iterator, Mapping, MutableMapping

from bs4 import BeautifulSoup, Tag


class SoupAttributes(MutableMapping[str, str]):
    """String view over a Tag's attributes.

    BeautifulSoup stores multi-valued attributes such as ``class`` as lists;
    they are read back joined by single spaces.
    """

    def __init__(self, tag: Tag) -> None:
        self._attrs = tag.attrs

    def __getitem__(self, key: str) -> str:
        value = self._attrs[key]
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return "" if value is None else str(value)

    def __setitem__(self, key: str, value: str) -> None:
        self._attrs[key] = value

    def __delitem__(self, key: str) -> None:
        del self._attrs[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attrs)

    def __len__(self) -> int:
        return len(self._attrs)


class SoupNode:
    """A DocumentNode backed by a bs4 Tag."""

    __slots__ = ("tag",)

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    def __repr__(self) -> str:
        return f"SoupNode({self.tag.name!r})"

    def __eq__(self, other: object) -> bool:
        # Tag.__eq__ compares markup, nodes are equal only when they wrap the same Tag
        return isinstance(other, SoupNode) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)

    @property
    def tag_name(self) -> str:
        return self.tag.name

    @property
    def attributes(self) -> SoupAttributes:
        return SoupAttributes(self.tag)

    @property
    def children(self) -> list["SoupNode"]:
        return [SoupNode(child) for child in self.tag.children if isinstance(child, Tag)]

    def append_child(self, child: "SoupNode") -> None:
        self.tag.append(child.tag)


class SoupDocument:
    """A DocumentTree over a parsed BeautifulSoup document.

    Parsing and serializing stay with the caller:

        soup = BeautifulSoup(html, "html.parser")
        await add_blurry_image_placeholders(SoupDocument(soup))
        html = str(soup)
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @property
    def root(self) -> SoupNode:
        return SoupNode(self.soup)

    def create_element(self, tag_name: str, attributes: Mapping[str, str] | None = None) -> SoupNode:
        return SoupNode(self.soup.new_tag(tag_name, attrs=dict(attributes or {})))
