"""Tests for diagnostics, verdicts and rendering."""

from sqlgate.diagnostics import Diagnostic, Level, Span, Verdict, codes
from sqlgate.diagnostics.render import render_json, render_text


def test_code_format():
    assert str(codes.EMPTY_INPUT) == "G0001"
    assert str(codes.MULTIPLE_STATEMENTS) == "G0202"
    assert str(codes.DESTRUCTIVE_OPERATION) == "G0301"


def test_builder_chain():
    diag = (
        Diagnostic.error(codes.MULTIPLE_STATEMENTS, "multiple statements")
        .span(Span(10, 18), "second statement starts here")
        .note("only single statements are allowed")
        .suggest("submit one statement at a time")
    )
    assert diag.level == Level.ERROR
    assert diag.is_blocking
    assert diag.primary_span == Span(10, 18)
    assert diag.notes == ["only single statements are allowed"]
    assert diag.suggestions == ["submit one statement at a time"]


def test_span_helpers():
    span = Span(7, 13)
    assert span.slice("SELECT orders") == "orders"
    assert len(span) == 6
    assert not span.is_empty
    assert Span(3, 3).is_empty


def test_reject_takes_first_suggestion():
    diag = (
        Diagnostic.error(codes.FILE_OPERATION, "File operations are not allowed")
        .suggest("first")
        .suggest("second")
    )
    verdict = Verdict.reject(diag, "file_operation")
    assert not verdict.is_valid
    assert verdict.error == "File operations are not allowed"
    assert verdict.suggestion == "first"
    assert verdict.code == codes.FILE_OPERATION
    assert verdict.classification == "file_operation"


def test_reject_without_suggestion():
    verdict = Verdict.reject(Diagnostic.error(codes.EMPTY_INPUT, "empty query"))
    assert verdict.suggestion is None
    assert verdict.to_dict() == {"isValid": False, "error": "empty query"}


def test_accept():
    verdict = Verdict.accept("safe_read")
    assert verdict.is_valid
    assert verdict.to_dict() == {"isValid": True}


def test_render_json_blocked():
    diag = (
        Diagnostic.error(codes.DESTRUCTIVE_OPERATION, "DROP operation is not allowed")
        .span(Span(0, 4), "here")
        .note("modifies schema")
        .suggest("use a SELECT")
    )
    data = render_json(Verdict.reject(diag, "destructive_write"), decision="blocked")
    assert data == {
        "isValid": False,
        "error": "DROP operation is not allowed",
        "suggestion": "use a SELECT",
        "code": "G0301",
        "classification": "destructive_write",
        "span": [0, 4],
        "notes": ["modifies schema"],
        "decision": "blocked",
    }


def test_render_json_valid():
    data = render_json(Verdict.accept("safe_read"))
    assert data == {"isValid": True, "code": None, "classification": "safe_read"}


def test_render_text():
    diag = (
        Diagnostic.error(codes.UNCLASSIFIED_OPERATION, "unrecognized statement type: EXPLAIN")
        .note("only SELECT and WITH statements are recognized as safe")
        .suggest("rephrase the query as a SELECT statement")
    )
    text = render_text(Verdict.reject(diag), decision="blocked")
    assert text.splitlines() == [
        "decision: blocked",
        "error[G0302]: unrecognized statement type: EXPLAIN",
        "  = note: only SELECT and WITH statements are recognized as safe",
        "  = help: rephrase the query as a SELECT statement",
    ]
    assert render_text(Verdict.accept("safe_read")) == "ok: safe_read"
