"""Minimal LSP server for PCG grammars — diagnostics, formatting, completion."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_FORMATTING,
    TEXT_DOCUMENT_RANGE_FORMATTING,
    CompletionItem,
    CompletionItemKind,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentFormattingParams,
    DocumentRangeFormattingParams,
    FormattingOptions,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
    TextEdit,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import TextDocument

from pcgfmt import __version__, extract_identifiers, format
from pcgfmt.errors import DiagnosticKind, resolve_position
from pcgfmt.errors import Diagnostic as GrammarDiagnostic
from pcgfmt.formatter import FormatOptions

logger = logging.getLogger(__name__)

server = LanguageServer("pcgfmt-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)

# Options used when the client sends none of its own
DEFAULT_OPTIONS = FormatOptions()


def _to_lsp_range(diag: GrammarDiagnostic, doc: TextDocument) -> Range:
    """Resolve a diagnostic's offset span to a 0-based LSP range, or 0:0 on failure.

    Columns are converted to the client's position encoding (UTF-16 by default).
    """
    source = doc.source
    start = resolve_position(source, diag.offset)
    end = resolve_position(source, diag.offset + diag.length)
    if start is None:
        origin = Position(line=0, character=0)
        return Range(start=origin, end=origin)
    if end is None:
        end = start
    codec = doc.position_codec
    lines = doc.lines
    return Range(
        start=codec.position_to_client_units(
            lines, Position(line=start.line - 1, character=start.column - 1)
        ),
        end=codec.position_to_client_units(
            lines, Position(line=end.line - 1, character=end.column - 1)
        ),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the grammar pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    result = format(source, DEFAULT_OPTIONS)

    diagnostics = [
        Diagnostic(
            range=_to_lsp_range(diag, doc),
            message=diag.message,
            severity=(
                DiagnosticSeverity.Warning
                if diag.kind == DiagnosticKind.SEMANTIC
                else DiagnosticSeverity.Error
            ),
            source="pcgfmt",
        )
        for diag in result.diagnostics
    ]
    logger.debug("Publishing %d diagnostics for %s", len(diagnostics), uri)

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _client_options(client: FormattingOptions | None) -> FormatOptions:
    """Layer the client's formatting options over the server defaults."""
    if client is None:
        return DEFAULT_OPTIONS
    overrides: dict[str, object] = {
        "indent_size": client.tab_size,
        "use_tabs": not client.insert_spaces,
    }
    if client.trim_trailing_whitespace is not None:
        overrides["trim_trailing_whitespace"] = client.trim_trailing_whitespace
    if client.insert_final_newline is not None:
        overrides["insert_final_newline"] = client.insert_final_newline
    return FormatOptions.from_mapping(overrides, DEFAULT_OPTIONS)


def _format_document(ls: LanguageServer, params: DocumentFormattingParams) -> list[TextEdit]:
    """Return a single whole-document edit, or no edits when nothing changes."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    options = _client_options(params.options)
    if not options.enabled:
        return []

    text = format(doc.source, options).text
    if text == doc.source:
        return []
    total_range = Range(
        start=Position(line=0, character=0),
        end=Position(line=len(doc.lines), character=0),
    )
    return [TextEdit(range=total_range, new_text=text)]


def _format_range(ls: LanguageServer, params: DocumentRangeFormattingParams) -> list[TextEdit]:
    """Format only the selected text and replace the selection with it."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    options = _client_options(params.options)
    if not options.enabled:
        return []

    start = doc.offset_at_position(params.range.start)
    end = doc.offset_at_position(params.range.end)
    selected = doc.source[start:end]
    text = format(selected, options).text
    if text == selected:
        return []
    return [TextEdit(range=params.range, new_text=text)]


def _complete(ls: LanguageServer, params: CompletionParams) -> list[CompletionItem]:
    """Offer every module name already used in the document."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    return [
        CompletionItem(label=name, kind=CompletionItemKind.Module)
        for name in sorted(extract_identifiers(doc.source))
    ]


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_FORMATTING)
def formatting(ls: LanguageServer, params: DocumentFormattingParams) -> list[TextEdit]:
    return _format_document(ls, params)


@server.feature(TEXT_DOCUMENT_RANGE_FORMATTING)
def range_formatting(ls: LanguageServer, params: DocumentRangeFormattingParams) -> list[TextEdit]:
    return _format_range(ls, params)


@server.feature(TEXT_DOCUMENT_COMPLETION)
def completion(ls: LanguageServer, params: CompletionParams) -> list[CompletionItem]:
    return _complete(ls, params)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting pcgfmt language server %s", __version__)
    server.start_io()
