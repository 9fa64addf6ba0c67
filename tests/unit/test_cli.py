"""Tests for the command-line entry point."""
from dataclasses import replace

import pytest

from ragbot.chatbot import Chatbot
from ragbot.cli import build_parser, main
from ragbot.rag.store_json import Record

from .helpers import completion_response, embedding_response


@pytest.fixture
def chatbot(settings, llm_client, embedder):
    return Chatbot(settings, llm_client=llm_client, embedder=embedder)


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@pytest.mark.asyncio
async def test_train_file_command(chatbot, llm_client, tmp_path, capsys):
    doc = tmp_path / "doc.md"
    doc.write_text("some words to learn", encoding="utf-8")
    llm_client.embed_content.return_value = embedding_response([1.0, 0.0])

    code = await main(["train-file", str(doc)], chatbot=chatbot)

    assert code == 0
    out = capsys.readouterr().out
    assert "Embedding chunk 1/1... done" in out
    assert "Saved:    1" in out
    assert len(chatbot.store.load()) == 1


@pytest.mark.asyncio
async def test_ask_command(chatbot, llm_client, capsys):
    chatbot.store.save([Record(text="a b", embedding=[1.0, 0.0])])
    llm_client.embed_content.return_value = embedding_response([1.0, 0.0])
    llm_client.generate_content.return_value = completion_response("The answer.")

    code = await main(["ask", "--show-match", "What?"], chatbot=chatbot)

    assert code == 0
    out = capsys.readouterr().out
    assert "similarity: 1.00" in out
    assert out.strip().endswith("The answer.")


@pytest.mark.asyncio
async def test_ask_without_training_reports_error(chatbot, llm_client, capsys):
    code = await main(["ask", "What?"], chatbot=chatbot)

    assert code == 1
    captured = capsys.readouterr()
    assert "Train first" in captured.err
    assert "Train first" not in captured.out
    llm_client.generate_content.assert_not_awaited()


@pytest.mark.asyncio
async def test_blank_question_rejected(chatbot, capsys):
    code = await main(["ask", "   "], chatbot=chatbot)

    assert code == 2
    assert "must not be empty" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_missing_api_key(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    code = await main(["--env-file", str(tmp_path / "none.env"), "ask", "q"])

    assert code == 1
    assert "GEMINI_API_KEY" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_train_with_unwritable_store_reports_error(
    settings, llm_client, embedder, tmp_path, capsys
):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    chatbot = Chatbot(
        replace(settings, vector_store_path=blocker / "store.json"),
        llm_client=llm_client,
        embedder=embedder,
    )
    doc = tmp_path / "doc.md"
    doc.write_text("words", encoding="utf-8")
    llm_client.embed_content.return_value = embedding_response([1.0])

    code = await main(["train-file", str(doc)], chatbot=chatbot)

    assert code == 1
    assert "Could not write training data" in capsys.readouterr().err
