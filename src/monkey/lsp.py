"""Minimal LSP server for Monkey — syntax diagnostics only."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from monkey import __version__
from monkey.config import ParserConfig, load_config
from monkey.lexer import Lexer
from monkey.parser import Parser

logger = logging.getLogger(__name__)

server = LanguageServer(
    "monkey-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish every syntax error."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri

    config = ParserConfig()
    # Non-file URIs have no directory to search for monkey.toml
    if doc.path:
        try:
            config = load_config(None, Path(doc.path).parent)
        except tomllib.TOMLDecodeError as exc:
            logger.warning("%s: invalid config, using defaults: %s", uri, exc)
    parser = Parser(Lexer(source, filename), max_depth=config.max_depth)
    parser.parse_program()

    diagnostics: list[Diagnostic] = []
    for diag in parser.diagnostics():
        # 1-based spans -> 0-based LSP positions
        start = diag.span.start
        end = diag.span.end
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=start.line - 1, character=start.column - 1),
                    end=Position(line=end.line - 1, character=end.column - 1),
                ),
                message=diag.message,
                severity=DiagnosticSeverity.Error,
                source="monkey",
            )
        )

    logger.debug("%s: %d syntax error(s)", uri, len(diagnostics))
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
