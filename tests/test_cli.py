"""Tests for the homepilot CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from homepilot import cli
from homepilot.generation import TextGenerator
from homepilot.storage import Storage

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

runner = CliRunner()


@pytest.fixture
def request_file(tmp_path: Path, buyer_request: dict, investor_request: dict) -> Path:
    path = tmp_path / "requests.json"
    path.write_text(json.dumps([buyer_request, investor_request]))
    return path


def test_analyze_saves_and_exports(tmp_path: Path, request_file: Path) -> None:
    db = tmp_path / "hp.duckdb"
    out = tmp_path / "run.json"
    result = runner.invoke(
        cli.app,
        ["analyze", str(request_file), "--config", str(CONFIG_PATH), "--save", "--db", str(db), "--out", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert "Saved 2 analyses" in result.output
    assert json.loads(out.read_text())["count"] == 2

    storage = Storage(db)
    assert len(storage.load_analyses()) == 2
    storage.close()

    history = runner.invoke(cli.app, ["history", "--db", str(db)])
    assert history.exit_code == 0, history.output
    assert "Stored analyses" in history.output


def test_analyze_incomplete_profile(tmp_path: Path, buyer_request: dict) -> None:
    del buyer_request["userProfile"]["loanTerm"]
    path = tmp_path / "req.json"
    path.write_text(json.dumps(buyer_request))
    result = runner.invoke(cli.app, ["analyze", str(path), "--config", str(CONFIG_PATH)])
    assert result.exit_code == 1
    assert "missing fields" in result.output


def test_analyze_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["analyze", str(tmp_path / "nope.json")])
    assert result.exit_code == 1


def test_recover_prints_document(tmp_path: Path) -> None:
    raw = tmp_path / "raw.txt"
    raw.write_text('```json\n{"score":80,"items":["a","b"')
    result = runner.invoke(cli.app, ["recover", str(raw)])
    assert result.exit_code == 0, result.output
    out = result.output
    assert json.loads(out[out.index("{"):]) == {"score": 80, "items": ["a", "b"]}


def test_recover_failure(tmp_path: Path) -> None:
    raw = tmp_path / "raw.txt"
    raw.write_text("no document here")
    result = runner.invoke(cli.app, ["recover", str(raw)])
    assert result.exit_code == 1


def test_history_empty(tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["history", "--db", str(tmp_path / "empty.duckdb")])
    assert result.exit_code == 0
    assert "No stored analyses" in result.output


def test_advise_uses_generator(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    class StubGenerator(TextGenerator):
        def __init__(self, params) -> None:
            self.params = params

        def generate(self, prompt: str, system_prompt: str | None = None) -> str:
            return '{"affordabilityScore": 66, "affordabilityLevel": "Stretch", "advisorMessage": "Negotiate'

        @property
        def source_name(self) -> str:
            return "stub"

    monkeypatch.setattr(cli, "ChatCompletionsGenerator", StubGenerator)
    prompt = tmp_path / "prompt.txt"
    prompt.write_text("Analyze this property")
    db = tmp_path / "hp.duckdb"
    result = runner.invoke(
        cli.app,
        ["advise", str(prompt), "--config", str(CONFIG_PATH), "--model", "test-model", "--save", "--db", str(db)],
    )
    assert result.exit_code == 0, result.output
    assert "Stretch" in result.output
    assert "Saved generated analysis" in result.output

    again = runner.invoke(
        cli.app,
        ["advise", str(prompt), "--config", str(CONFIG_PATH), "--save", "--db", str(db)],
    )
    assert again.exit_code == 0, again.output
    storage = Storage(db)
    count = storage._connect().execute("SELECT COUNT(*) FROM generated_analyses").fetchone()[0]
    storage.close()
    assert count == 2


def test_run_ids_are_unique_within_a_second() -> None:
    ids = {cli._run_id() for _ in range(50)}
    assert len(ids) == 50
