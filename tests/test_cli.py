"""Tests for the bills CLI."""

import json

from click.testing import CliRunner

from bills.cli import cli


def test_schema_command_prints_sdl():
    result = CliRunner().invoke(cli, ["schema"])

    assert result.exit_code == 0, result.output
    assert "type Query" in result.output
    assert "createUser" in result.output


def test_query_command_runs_against_seeded_store():
    result = CliRunner().invoke(cli, ["query", "{ users { name } }"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"data": {"users": [{"name": "Pasha"}, {"name": "Ira"}]}}


def test_query_command_with_variables():
    result = CliRunner().invoke(
        cli,
        ["query", "query($id: ID!) { user(id: $id) { name } }", "--variables", '{"id": "2"}'],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"data": {"user": {"name": "Ira"}}}


def test_query_command_without_seed():
    result = CliRunner().invoke(cli, ["query", "{ users { id } }", "--no-seed"])

    assert json.loads(result.output) == {"data": {"users": []}}


def test_query_command_fails_on_invalid_document():
    result = CliRunner().invoke(cli, ["query", "{ users { password } }"])

    assert result.exit_code == 1
    body = json.loads(result.output)
    assert body["data"] is None
    assert body["errors"][0]["extensions"]["code"] == "SCHEMA_VALIDATION_FAILED"


def test_query_command_rejects_bad_variables_json():
    result = CliRunner().invoke(cli, ["query", "{ users { id } }", "--variables", "{nope"])

    assert result.exit_code == 2
    assert "invalid JSON" in result.output
