"""Node definitions for the comment-preserving Clojure syntax tree."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_string(self) -> str:
        raise NotImplementedError


class Whitespace(Node):
    text: str = " "

    def to_string(self) -> str:
        return self.text


class Newline(Node):
    text: str = "\n"

    def to_string(self) -> str:
        return self.text


class Comma(Node):
    text: str = ","

    def to_string(self) -> str:
        return self.text


class Comment(Node):
    text: str

    def to_string(self) -> str:
        return self.text


class Atom(Node):
    """Symbol, keyword, number, string, character, regex or symbolic value, spelled as in the source."""

    text: str

    def to_string(self) -> str:
        return self.text

    @property
    def is_string(self) -> bool:
        return self.text.startswith('"')

    @property
    def is_keyword(self) -> bool:
        return self.text.startswith(":")


class Collection(Node):
    open: ClassVar[str]
    close: ClassVar[str]

    children: tuple[Node, ...] = ()

    def to_string(self) -> str:
        return self.open + "".join(child.to_string() for child in self.children) + self.close


class ListNode(Collection):
    open: ClassVar[str] = "("
    close: ClassVar[str] = ")"


class VectorNode(Collection):
    open: ClassVar[str] = "["
    close: ClassVar[str] = "]"


class MapNode(Collection):
    open: ClassVar[str] = "{"
    close: ClassVar[str] = "}"


class SetNode(Collection):
    open: ClassVar[str] = "#{"
    close: ClassVar[str] = "}"


class Wrapper(Node):
    """A reader macro applied to exactly one form."""

    marker: ClassVar[str]

    child: Node

    @property
    def prefix(self) -> str:
        return self.marker

    def to_string(self) -> str:
        return self.prefix + self.child.to_string()


class Quote(Wrapper):
    marker: ClassVar[str] = "'"


class SyntaxQuote(Wrapper):
    marker: ClassVar[str] = "`"


class Unquote(Wrapper):
    marker: ClassVar[str] = "~"


class UnquoteSplicing(Wrapper):
    marker: ClassVar[str] = "~@"


class VarQuote(Wrapper):
    marker: ClassVar[str] = "#'"


class Deref(Wrapper):
    marker: ClassVar[str] = "@"


class FnLiteral(Wrapper):
    marker: ClassVar[str] = "#"


class Uneval(Wrapper):
    marker: ClassVar[str] = "#_"


class ReaderConditional(Wrapper):
    marker: ClassVar[str] = "#?"

    splicing: bool = False

    @property
    def prefix(self) -> str:
        return "#?@" if self.splicing else "#?"


class Tagged(Wrapper):
    marker: ClassVar[str] = "#"

    tag: str

    @property
    def prefix(self) -> str:
        return f"#{self.tag} "


class NamespacedMap(Wrapper):
    marker: ClassVar[str] = "#"

    namespace: str

    @property
    def prefix(self) -> str:
        return f"#{self.namespace}"


class Meta(Node):
    meta: Node
    target: Node

    def to_string(self) -> str:
        return f"^{self.meta.to_string()} {self.target.to_string()}"


class Forms(Node):
    """Document root."""

    children: tuple[Node, ...] = ()

    def to_string(self) -> str:
        return "".join(child.to_string() for child in self.children)


class Fragment(Node):
    """Rendered nodes that share a parent position, e.g. comments lifted in front of a form."""

    children: tuple[Node, ...] = ()

    def to_string(self) -> str:
        return "".join(child.to_string() for child in self.children)


NOISE_TYPES = (Whitespace, Newline, Comma)


def is_noise(node: Node) -> bool:
    return isinstance(node, NOISE_TYPES)


def contains_comment(node: Node) -> bool:
    match node:
        case Comment():
            return True
        case Collection() | Forms() | Fragment():
            return any(contains_comment(child) for child in node.children)
        case Wrapper():
            return contains_comment(node.child)
        case Meta():
            return contains_comment(node.meta) or contains_comment(node.target)
    return False
