"""Tests for paperlens summarize / insights / search."""

from __future__ import annotations

from typer.testing import CliRunner

from fakes import make_doc
from paperlens.cli.main import app
from paperlens.store.models import Summary
from paperlens.workspace.service import open_store

runner = CliRunner()

SUMMARY_BODY = {
    "abstract": "We study attention.",
    "findings": ["Attention works"],
    "methodology": "Experiments",
    "limitations": "Small data",
}


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------


def test_summarize_generates_and_stores(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1", content="paper text"))
    cli_backend.reply("/api/summarize/", json_body=SUMMARY_BODY)

    result = runner.invoke(app, ["summarize", "--doc", "abc-1", "--db", str(db_path)])

    assert result.exit_code == 0, result.output
    assert "We study attention." in result.output
    assert "Attention works" in result.output
    assert cli_backend.bodies("/api/summarize/") == [{"content": "paper text"}]
    with open_store(db_path) as store:
        assert store.get("abc-1").summary.methodology == "Experiments"


def test_summarize_existing_summary_skips_backend(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1", summary=Summary(abstract="Cached abstract")))

    result = runner.invoke(app, ["summarize", "--doc", "abc-1", "--db", str(db_path)])

    assert result.exit_code == 0
    assert "Cached abstract" in result.output
    assert cli_backend.requests == []


def test_summarize_backend_failure(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply("/api/summarize/", status=500, json_body={"error": "model offline"})

    result = runner.invoke(app, ["summarize", "--doc", "abc-1", "--db", str(db_path)])

    assert result.exit_code == 1
    assert "AI generation failed: model offline" in result.output
    assert "paperlens summarize --doc abc-1" in result.output
    with open_store(db_path) as store:
        assert store.get("abc-1").summary is None


def test_summarize_unknown_document(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    result = runner.invoke(app, ["summarize", "--doc", "zzz", "--db", str(db_path)])
    assert result.exit_code == 1
    assert cli_backend.requests == []


# ---------------------------------------------------------------------------
# insights
# ---------------------------------------------------------------------------


def test_insights_generates_and_stores(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply(
        "/api/insights/",
        json_body={
            "objectives": ["Measure"],
            "keyConcepts": ["self-attention"],
            "results": ["BLEU up"],
            "conclusions": ["Works"],
        },
    )

    result = runner.invoke(app, ["insights", "--doc", "abc-1", "--db", str(db_path)])

    assert result.exit_code == 0, result.output
    assert "self-attention" in result.output
    with open_store(db_path) as store:
        assert store.get("abc-1").insights.results == ("BLEU up",)


def test_insights_http_error_message(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply("/api/insights/", status=500, json_body={"error": "rate limited"})

    result = runner.invoke(app, ["insights", "--doc", "abc-1", "--db", str(db_path)])

    assert result.exit_code == 1
    assert "Insights extraction failed: rate limited" in result.output


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------


def test_search_prints_answer_and_sources(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply(
        "/api/search/",
        json_body={
            "answer": "Attention improves translation.",
            "results": [{"docName": "paper.pdf", "page": 3, "text": "BLEU of 28.4"}],
        },
    )

    result = runner.invoke(app, ["search", "attention?", "--db", str(db_path)])

    assert result.exit_code == 0, result.output
    assert "Attention improves translation." in result.output
    assert "p.3" in result.output
    assert cli_backend.bodies("/api/search/") == [{"query": "attention?"}]


def test_search_empty_library(db_path, cli_backend):
    result = runner.invoke(app, ["search", "anything", "--db", str(db_path)])
    assert result.exit_code == 0
    assert "No papers uploaded" in result.output
    assert cli_backend.requests == []


def test_search_blank_query(db_path, cli_backend):
    result = runner.invoke(app, ["search", "   ", "--db", str(db_path)])
    assert result.exit_code == 1
    assert cli_backend.requests == []


def test_search_failure(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply("/api/search/", status=502, text="bad gateway")

    result = runner.invoke(app, ["search", "attention?", "--db", str(db_path)])

    assert result.exit_code == 1
    assert "Failed to fetch search results: Bad Gateway" in result.output


# ---------------------------------------------------------------------------
# Bracketed text is printed literally
# ---------------------------------------------------------------------------


def test_backend_error_with_brackets_is_printed_literally(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply("/api/insights/", status=500, json_body={"error": "bad input [/] here"})

    result = runner.invoke(app, ["insights", "--doc", "abc-1", "--db", str(db_path)])

    assert result.exit_code == 1
    assert "Insights extraction failed: bad input [/] here" in result.output


def test_search_query_with_brackets(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply("/api/search/", json_body={"answer": "An answer.", "results": []})

    result = runner.invoke(app, ["search", "what is x[/]?", "--db", str(db_path)])

    assert result.exit_code == 0, result.output
    assert "what is x[/]?" in result.output
    assert "An answer." in result.output


def test_failed_search_with_brackets_shows_retry(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1"))
    cli_backend.reply("/api/search/", status=500, json_body={"error": "[red]oops"})

    result = runner.invoke(app, ["search", "x[/]", "--db", str(db_path)])

    assert result.exit_code == 1
    assert "Failed to fetch search results: [red]oops" in result.output
    assert 'paperlens search "x[/]"' in result.output


def test_summary_of_bracketed_file_name(db_path, seed, cli_backend):
    seed(make_doc(id="abc-1", name="paper[/]v2.pdf"))
    cli_backend.reply("/api/summarize/", json_body=SUMMARY_BODY)

    result = runner.invoke(app, ["summarize", "--doc", "abc-1", "--db", str(db_path)])

    assert result.exit_code == 0, result.output
    assert "paper[/]v2.pdf" in result.output
