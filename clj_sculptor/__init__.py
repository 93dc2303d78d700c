"""Comment-preserving source formatter for Clojure-family code."""

from .lexer import ClojureSyntaxError, Lexer, LexerError, Token, TokenType, tokenize
from .nodes import (
    Atom,
    Comment,
    Forms,
    Fragment,
    ListNode,
    MapNode,
    Meta,
    Node,
    SetNode,
    VectorNode,
)
from .reader import ParseException, Reader, parse_string
from .renderer import Renderer
from .forms import SPECIAL_FORMS
from .namespace import normalize_namespace
from .formatter import SourceFormatter, format_source

__all__ = [
    "Atom",
    "ClojureSyntaxError",
    "Comment",
    "Forms",
    "Fragment",
    "Lexer",
    "LexerError",
    "ListNode",
    "MapNode",
    "Meta",
    "Node",
    "ParseException",
    "Reader",
    "Renderer",
    "SPECIAL_FORMS",
    "SetNode",
    "SourceFormatter",
    "Token",
    "TokenType",
    "VectorNode",
    "format_source",
    "normalize_namespace",
    "parse_string",
    "tokenize",
]
