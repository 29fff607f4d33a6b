"""Tree-sitter based parser for TypeScript and JavaScript sources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Parser

from .ts_lang import load_typescript_language


TSX_SUFFIXES = {".tsx", ".jsx"}


@dataclass
class ParsedSource:
    tree: object
    source_bytes: bytes


def _make_parser(tsx: bool) -> Parser:
    parser = Parser()
    language = load_typescript_language(tsx=tsx)
    # tree-sitter API supports either set_language or direct attribute.
    if hasattr(parser, "set_language"):
        parser.set_language(language)
    else:
        parser.language = language
    return parser


class TypeScriptParser:
    def __init__(self) -> None:
        self._parser = _make_parser(tsx=False)
        self._tsx_parser: Parser | None = None

    def parse_bytes(self, source_bytes: bytes, tsx: bool = False) -> ParsedSource:
        parser = self._tsx() if tsx else self._parser
        tree = parser.parse(source_bytes)
        return ParsedSource(tree=tree, source_bytes=source_bytes)

    def parse_text(self, source_text: str, tsx: bool = False) -> ParsedSource:
        return self.parse_bytes(source_text.encode("utf-8"), tsx=tsx)

    def parse_file(self, path: str | Path) -> ParsedSource:
        with open(path, "rb") as handle:
            source_bytes = handle.read()
        return self.parse_bytes(source_bytes, tsx=Path(path).suffix.lower() in TSX_SUFFIXES)

    def _tsx(self) -> Parser:
        if self._tsx_parser is None:
            self._tsx_parser = _make_parser(tsx=True)
        return self._tsx_parser

