from typing import Any, Optional, TypedDict, NotRequired
from enum import Enum, auto
from dataclasses import dataclass
import re
from clj_sculptor.utils import resolve_config
from clj_sculptor.logger import Logger


class TokenType(Enum):
    WHITESPACE = auto()
    NEWLINE = auto()
    COMMA = auto()
    COMMENT = auto()
    OPEN_LIST = auto()
    OPEN_VECTOR = auto()
    OPEN_MAP = auto()
    OPEN_SET = auto()
    OPEN_FN = auto()
    OPEN_READER_CONDITIONAL = auto()
    CLOSE = auto()
    QUOTE = auto()
    SYNTAX_QUOTE = auto()
    UNQUOTE = auto()
    UNQUOTE_SPLICING = auto()
    DEREF = auto()
    META = auto()
    VAR_QUOTE = auto()
    UNEVAL = auto()
    TAG = auto()
    NAMESPACED_MAP = auto()
    STRING = auto()
    REGEX = auto()
    CHARACTER = auto()
    SYMBOLIC = auto()
    TOKEN = auto()
    EOF = auto()


@dataclass
class Token:
    token_type: TokenType
    value: Any
    line: int
    column: int


DELIMITERS = {"(", ")", "[", "]", "{", "}"}
SIMPLE_PREFIXES = {
    "'": TokenType.QUOTE,
    "`": TokenType.SYNTAX_QUOTE,
    "@": TokenType.DEREF,
    "^": TokenType.META,
}
NUMBER_PATTERN = re.compile(
    r"[+-]?(?:"
    r"0[xX][0-9A-Fa-f]+N?"
    r"|[0-9]+[rR][0-9A-Za-z]+"
    r"|[0-9]+/[0-9]+"
    r"|[0-9]+N"
    r"|[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?M?"
    r")"
)


class ClojureSyntaxError(Exception):
    """Source text that cannot be read; carries the 1-based position of the fault."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.message = message
        self.line = line
        self.column = column


class LexerError(ClojureSyntaxError):
    pass


class LexerConfig(TypedDict):
    tokenize: NotRequired[bool]
    enable_logger: NotRequired[bool]


class LexerConfigRequired(TypedDict):
    tokenize: bool
    enable_logger: bool


DEFAULT_CONFIG: LexerConfigRequired = {
    "tokenize": True,
    "enable_logger": False,
}


class Lexer:
    def __init__(self, input: str, config: Optional[LexerConfig] = None):
        self.input = input
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "Lexer Logger", "is_enabled": self.config["enable_logger"]}).logger
        self._start = 0
        self.position = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []
        if self.config["tokenize"]:
            self.tokenize()

    @property
    def has_more_chars(self):
        return self.position < len(self.input)

    @property
    def char(self):
        return self.input[self.position] if self.has_more_chars else "\0"

    @property
    def current_value(self):
        return self.input[self._start : self.position]

    def _advance(self, steps=1):
        for _ in range(steps):
            if not self.has_more_chars:
                raise LexerError("Attempt to advance beyond end of input", self.line, self.column)
            if self.char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.position += 1

    def _consume_while(self, condition):
        while self.has_more_chars and condition(self.char):
            self._advance()

    def _peek(self, steps=1):
        if self.position + steps < len(self.input):
            return self.input[self.position + steps]
        return "\0"

    def _begin(self):
        self._start = self.position
        return self.line, self.column

    def _add_token(self, token_type: TokenType, value: Any, line: int, column: int):
        self.logger.debug(f"Adding token {token_type} with value {value!r} at line {line}, column {column}")
        self.tokens.append(Token(token_type, value, line, column))

    def _is_whitespace(self, char: str) -> bool:
        return char.isspace() and char not in {"\n", "\r"}

    def _is_token_char(self, char: str) -> bool:
        return not (char.isspace() or char in DELIMITERS or char in {",", '"', ";", "\0"})

    def tokenize(self):
        self.tokens = []
        try:
            self.logger.info("Starting tokenization")
            while self.has_more_chars:
                char = self.char
                if char in {"\n", "\r"}:
                    self._handle_newline()
                elif self._is_whitespace(char):
                    self._handle_whitespace()
                elif char == ",":
                    self._handle_commas()
                elif char == ";":
                    self._handle_comment()
                elif char in DELIMITERS:
                    self._handle_delimiter()
                elif char == '"':
                    self._handle_string(TokenType.STRING)
                elif char == "\\":
                    self._handle_character()
                elif char == "#":
                    self._handle_dispatch()
                elif char == "~":
                    self._handle_unquote()
                elif char in SIMPLE_PREFIXES:
                    line, column = self._begin()
                    self._advance()
                    self._add_token(SIMPLE_PREFIXES[char], char, line, column)
                else:
                    self._handle_token()
            self._add_token(TokenType.EOF, None, self.line, self.column)
            self.logger.info("Tokenization complete")
            return self.tokens
        except LexerError as e:
            self.logger.error(e)
            raise

    def _handle_newline(self):
        line, column = self._begin()
        if self.char == "\r" and self._peek() == "\n":
            self._advance()
        self._advance()
        self._add_token(TokenType.NEWLINE, "\n", line, column)

    def _handle_whitespace(self):
        line, column = self._begin()
        self._consume_while(self._is_whitespace)
        self._add_token(TokenType.WHITESPACE, self.current_value, line, column)

    def _handle_commas(self):
        line, column = self._begin()
        self._consume_while(lambda c: c == ",")
        self._add_token(TokenType.COMMA, self.current_value, line, column)

    def _handle_comment(self):
        line, column = self._begin()
        self._consume_while(lambda c: c not in {"\n", "\r"})
        self._add_token(TokenType.COMMENT, self.current_value, line, column)

    def _handle_delimiter(self):
        line, column = self._begin()
        char = self.char
        self._advance()
        if char == "(":
            self._add_token(TokenType.OPEN_LIST, char, line, column)
        elif char == "[":
            self._add_token(TokenType.OPEN_VECTOR, char, line, column)
        elif char == "{":
            self._add_token(TokenType.OPEN_MAP, char, line, column)
        else:
            self._add_token(TokenType.CLOSE, char, line, column)

    def _handle_string(self, token_type: TokenType, line: Optional[int] = None, column: Optional[int] = None):
        # regexes arrive with _start and the position already pointing at the leading #
        if line is None or column is None:
            line, column = self._begin()
        self._advance()
        while self.char != '"':
            if not self.has_more_chars:
                raise LexerError("Unterminated string", line, column)
            if self.char == "\\":
                self._advance()
                if not self.has_more_chars:
                    raise LexerError("Unterminated string", line, column)
            self._advance()
        self._advance()
        self._add_token(token_type, self.current_value, line, column)

    def _handle_character(self):
        line, column = self._begin()
        self._advance()
        if not self.has_more_chars:
            raise LexerError("Character literal is missing its character", line, column)
        first = self.char
        self._advance()
        if first.isalnum():
            self._consume_while(self._is_token_char)
        self._add_token(TokenType.CHARACTER, self.current_value, line, column)

    def _handle_unquote(self):
        line, column = self._begin()
        if self._peek() == "@":
            self._advance(2)
            self._add_token(TokenType.UNQUOTE_SPLICING, "~@", line, column)
        else:
            self._advance()
            self._add_token(TokenType.UNQUOTE, "~", line, column)

    def _handle_dispatch(self):
        line, column = self._begin()
        following = self._peek()
        if following == "{":
            self._advance(2)
            self._add_token(TokenType.OPEN_SET, "#{", line, column)
        elif following == "(":
            self._advance(2)
            self._add_token(TokenType.OPEN_FN, "#(", line, column)
        elif following == "'":
            self._advance(2)
            self._add_token(TokenType.VAR_QUOTE, "#'", line, column)
        elif following == "_":
            self._advance(2)
            self._add_token(TokenType.UNEVAL, "#_", line, column)
        elif following == "^":
            self._advance(2)
            self._add_token(TokenType.META, "#^", line, column)
        elif following == "!":
            self._handle_comment()
        elif following == '"':
            self._advance()
            self._handle_string(TokenType.REGEX, line, column)
        elif following == "?":
            self._handle_reader_conditional(line, column)
        elif following == "#":
            self._advance(2)
            self._consume_while(self._is_token_char)
            if self.current_value == "##":
                raise LexerError("Symbolic value is missing its name", line, column)
            self._add_token(TokenType.SYMBOLIC, self.current_value, line, column)
        elif following == ":":
            self._advance(2)
            self._consume_while(self._is_token_char)
            self._add_token(TokenType.NAMESPACED_MAP, self.current_value, line, column)
        elif following.isalpha():
            self._advance()
            self._consume_while(self._is_token_char)
            self._add_token(TokenType.TAG, self.current_value, line, column)
        else:
            raise LexerError(f"Unsupported dispatch macro '#{following}'", line, column)

    def _handle_reader_conditional(self, line: int, column: int):
        if self._peek(2) == "(":
            self._advance(3)
        elif self._peek(2) == "@" and self._peek(3) == "(":
            self._advance(4)
        else:
            raise LexerError("Reader conditional must be followed by a list", line, column)
        self._add_token(TokenType.OPEN_READER_CONDITIONAL, self.current_value, line, column)

    def _handle_token(self):
        line, column = self._begin()
        self._consume_while(self._is_token_char)
        value = self.current_value
        if not value:
            raise LexerError(f"Unexpected character '{self.char}'", line, column)
        if self._looks_numeric(value) and not NUMBER_PATTERN.fullmatch(value):
            raise LexerError(f"Invalid number '{value}'", line, column)
        if value.startswith(":") and (value in {":", "::"} or value.startswith(":::") or value.endswith(":")):
            raise LexerError(f"Invalid keyword '{value}'", line, column)
        self._add_token(TokenType.TOKEN, value, line, column)

    def _looks_numeric(self, value: str) -> bool:
        if value[0].isdigit():
            return True
        return value[0] in {"+", "-"} and len(value) > 1 and value[1].isdigit()


def tokenize(text: str, config: Optional[LexerConfig] = None) -> list[Token]:
    return Lexer(text, config={**(config or {}), "tokenize": True}).tokens
