from typing import Any, List, Optional, NotRequired, TypedDict
from clj_sculptor.lexer import ClojureSyntaxError, Lexer, LexerConfig, Token, TokenType
from clj_sculptor.utils import resolve_config
from clj_sculptor.logger import Logger
from clj_sculptor.nodes import (
    Atom,
    Comma,
    Comment,
    Deref,
    FnLiteral,
    Forms,
    ListNode,
    MapNode,
    Meta,
    NamespacedMap,
    Newline,
    Node,
    Quote,
    ReaderConditional,
    SetNode,
    SyntaxQuote,
    Tagged,
    Uneval,
    Unquote,
    UnquoteSplicing,
    VarQuote,
    VectorNode,
    Whitespace,
)


class ParseException(ClojureSyntaxError):
    def __init__(self, message: str, token: Token):
        self.token = token
        super().__init__(message, token.line, token.column)


OPENING_TOKENS = {
    TokenType.OPEN_LIST: ("(", ")"),
    TokenType.OPEN_VECTOR: ("[", "]"),
    TokenType.OPEN_MAP: ("{", "}"),
    TokenType.OPEN_SET: ("#{", "}"),
    TokenType.OPEN_FN: ("#(", ")"),
    TokenType.OPEN_READER_CONDITIONAL: ("#?(", ")"),
}

WRAPPER_TOKENS = {
    TokenType.QUOTE: Quote,
    TokenType.SYNTAX_QUOTE: SyntaxQuote,
    TokenType.UNQUOTE: Unquote,
    TokenType.UNQUOTE_SPLICING: UnquoteSplicing,
    TokenType.DEREF: Deref,
    TokenType.VAR_QUOTE: VarQuote,
    TokenType.UNEVAL: Uneval,
}

ATOM_TOKENS = {
    TokenType.TOKEN,
    TokenType.STRING,
    TokenType.REGEX,
    TokenType.CHARACTER,
    TokenType.SYMBOLIC,
}


class ReaderConfig(TypedDict):
    parse: NotRequired[bool]
    enable_logger: NotRequired[bool]


class ReaderConfigRequired(TypedDict):
    parse: bool
    enable_logger: bool


DEFAULT_CONFIG: ReaderConfigRequired = {"parse": True, "enable_logger": False}


class Reader:
    """Builds a :class:`Forms` tree from lexer tokens, keeping comments and whitespace as nodes."""

    def __init__(self, tokens: List[Token], config: Optional[ReaderConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "Reader Logger", "is_enabled": self.config["enable_logger"]}).logger
        self.logger.info("Reader initialized")
        self.tokens = tokens
        self.position = 0
        self.parsed_tree: Optional[Forms] = None
        if self.config["parse"]:
            self.parsed_tree = self.parse_tokens()
            self.logger.debug("Tokens read into syntax tree")

    @property
    def current_token(self) -> Token:
        if self.position >= len(self.tokens):
            last = self.tokens[-1] if self.tokens else None
            return Token(TokenType.EOF, None, last.line if last else 1, last.column if last else 1)
        return self.tokens[self.position]

    def advance(self, steps: int = 1) -> None:
        self.position = min(self.position + steps, len(self.tokens))

    def expect(self, expected_type: TokenType | List[TokenType], expected_value: Optional[Any] = None):
        if not isinstance(expected_type, list):
            expected_type = [expected_type]
        if self.current_token.token_type not in expected_type:
            raise ParseException(
                f"Expected token type {expected_type}, but got {self.current_token.token_type}",
                self.current_token,
            )
        elif expected_value and self.current_token.value != expected_value:
            raise ParseException(
                f"Expected token value {expected_value}, but got {self.current_token.value}",
                self.current_token,
            )

    def consume(self, expected_type: TokenType | List[TokenType], expected_value: Optional[Any] = None) -> Token:
        current_token = self.current_token
        self.expect(expected_type=expected_type, expected_value=expected_value)
        self.advance()
        self.logger.debug(f"Consumed token {current_token}")
        return current_token

    def parse_tokens(self) -> Forms:
        self.position = 0
        children: list[Node] = []
        while self.current_token.token_type != TokenType.EOF:
            if self.current_token.token_type == TokenType.CLOSE:
                raise ParseException(f"Unmatched delimiter '{self.current_token.value}'", self.current_token)
            children.extend(self._parse())
        self.logger.info(f"Read {len(children)} top-level nodes")
        return Forms(children=tuple(children))

    def _parse(self) -> list[Node]:
        """Read the node at the cursor.

        Comments that sit between a reader macro and its form are returned ahead of
        the node (each followed by a newline) so the caller keeps them as siblings.
        """
        current_token = self.current_token
        current_token_type = current_token.token_type
        if current_token_type == TokenType.WHITESPACE:
            return [Whitespace(text=self.consume(TokenType.WHITESPACE).value)]
        elif current_token_type == TokenType.NEWLINE:
            return [Newline(text=self.consume(TokenType.NEWLINE).value)]
        elif current_token_type == TokenType.COMMA:
            return [Comma(text=self.consume(TokenType.COMMA).value)]
        elif current_token_type == TokenType.COMMENT:
            return [Comment(text=self.consume(TokenType.COMMENT).value)]
        elif current_token_type in ATOM_TOKENS:
            return [Atom(text=self.consume(current_token_type).value)]
        elif current_token_type in OPENING_TOKENS:
            return [self._parse_collection()]
        elif current_token_type in WRAPPER_TOKENS:
            self.advance()
            lifted, child = self._parse_target(current_token)
            return [*lifted, WRAPPER_TOKENS[current_token_type](child=child)]
        elif current_token_type == TokenType.META:
            self.advance()
            lifted, meta = self._parse_target(current_token)
            more, target = self._parse_target(current_token)
            return [*lifted, *more, Meta(meta=meta, target=target)]
        elif current_token_type == TokenType.TAG:
            self.advance()
            lifted, child = self._parse_target(current_token)
            return [*lifted, Tagged(tag=current_token.value[1:], child=child)]
        elif current_token_type == TokenType.NAMESPACED_MAP:
            self.advance()
            lifted, child = self._parse_target(current_token)
            if not isinstance(child, MapNode):
                raise ParseException("Namespaced map prefix must be followed by a map", current_token)
            return [*lifted, NamespacedMap(namespace=current_token.value[1:], child=child)]
        elif current_token_type == TokenType.CLOSE:
            raise ParseException(f"Unexpected closing delimiter '{current_token.value}'", current_token)
        else:
            raise ParseException(f"Unexpected token type {current_token_type}", current_token)

    def _parse_target(self, prefix_token: Token) -> tuple[list[Node], Node]:
        lifted: list[Node] = []
        while True:
            token_type = self.current_token.token_type
            if token_type in {TokenType.WHITESPACE, TokenType.NEWLINE, TokenType.COMMA}:
                self.advance()
            elif token_type == TokenType.COMMENT:
                lifted.extend([Comment(text=self.consume(TokenType.COMMENT).value), Newline()])
            elif token_type in {TokenType.EOF, TokenType.CLOSE}:
                raise ParseException(f"'{prefix_token.value}' is not followed by a form", prefix_token)
            else:
                break
        *more, node = self._parse()
        return [*lifted, *more], node

    def _parse_collection(self) -> Node:
        open_token = self.current_token
        opening, closing = OPENING_TOKENS[open_token.token_type]
        self.advance()
        children: list[Node] = []
        while True:
            current_token = self.current_token
            if current_token.token_type == TokenType.EOF:
                raise ParseException(f"Unclosed delimiter '{opening}'", open_token)
            if current_token.token_type == TokenType.CLOSE:
                if current_token.value != closing:
                    raise ParseException(
                        f"Mismatched delimiter '{current_token.value}', expected '{closing}' "
                        f"to close '{opening}' from line {open_token.line}",
                        current_token,
                    )
                self.advance()
                break
            children.extend(self._parse())
        return self._build_collection(open_token, tuple(children))

    def _build_collection(self, open_token: Token, children: tuple[Node, ...]) -> Node:
        match open_token.token_type:
            case TokenType.OPEN_LIST:
                return ListNode(children=children)
            case TokenType.OPEN_VECTOR:
                return VectorNode(children=children)
            case TokenType.OPEN_MAP:
                return MapNode(children=children)
            case TokenType.OPEN_SET:
                return SetNode(children=children)
            case TokenType.OPEN_FN:
                return FnLiteral(child=ListNode(children=children))
            case TokenType.OPEN_READER_CONDITIONAL:
                return ReaderConditional(splicing=open_token.value == "#?@(", child=ListNode(children=children))
        raise ParseException(f"Unknown collection opener '{open_token.value}'", open_token)


def parse_string(text: str, config: Optional[ReaderConfig] = None, lexer_config: Optional[LexerConfig] = None) -> Forms:
    """Read ``text`` into a :class:`Forms` tree, raising :class:`ClojureSyntaxError` on malformed input."""
    lexer = Lexer(text, config={**(lexer_config or {}), "tokenize": True})
    reader = Reader(lexer.tokens, config={**(config or {}), "parse": True})
    return reader.parsed_tree
