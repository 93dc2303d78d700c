from typing import Optional, NotRequired, TypedDict
from clj_sculptor.lexer import Lexer, LexerConfig
from clj_sculptor.logger import Logger
from clj_sculptor.reader import Reader, ReaderConfig
from clj_sculptor.renderer import Renderer, RendererConfig
from clj_sculptor.nodes import Node
from clj_sculptor.utils import resolve_config


class FormatterConfig(TypedDict):
    lexer_config: NotRequired[LexerConfig]
    reader_config: NotRequired[ReaderConfig]
    renderer_config: NotRequired[RendererConfig]
    enable_logger: NotRequired[bool]


class FormatterConfigRequired(TypedDict):
    lexer_config: LexerConfig
    reader_config: ReaderConfig
    renderer_config: RendererConfig
    enable_logger: bool


DEFAULT_CONFIG: FormatterConfigRequired = {
    "lexer_config": {},
    "reader_config": {},
    "renderer_config": {},
    "enable_logger": False,
}


class SourceFormatter:
    """Runs source text through the lexer, the reader and the renderer."""

    def __init__(self, input: str, config: Optional[FormatterConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "Formatter Logger", "is_enabled": self.config["enable_logger"]}).logger
        self.input = input
        self.lexer = Lexer(input=self.input, config={**self.config["lexer_config"], "tokenize": True})
        self.reader = Reader(tokens=self.lexer.tokens, config={**self.config["reader_config"], "parse": True})
        self.renderer = Renderer(config=self.config["renderer_config"])
        self.formatted_tree: Node = self.renderer.render(0, self.reader.parsed_tree)
        self.formatted_text = self.formatted_tree.to_string()
        self.logger.info(f"Formatted {len(self.input)} characters into {len(self.formatted_text)}")


def format_source(text: str, config: Optional[FormatterConfig] = None) -> str:
    """Return ``text`` in canonical layout, without a trailing newline.

    Raises :class:`clj_sculptor.lexer.ClojureSyntaxError` when ``text`` cannot be read.
    """
    return SourceFormatter(text, config=config).formatted_text
