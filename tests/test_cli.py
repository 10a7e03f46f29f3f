"""Tests for the gql-compose command-line interface."""

import pytest
from click.testing import CliRunner

from gql_compose.cli import collect_schema_files, main


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.graphql"
    path.write_text(
        """
        enum Color { RED GREEN }

        type Query {
            favorite: Color
        }
        """
    )
    return path


@pytest.fixture
def schema_dir(tmp_path):
    root = tmp_path / "schema"
    (root / "nested").mkdir(parents=True)
    (root / "base.graphqls").write_text("type Query { hello: String }")
    (root / "nested" / "extra.graphql").write_text("extend type Query { world: Int }")
    (root / "notes.txt").write_text("not a schema")
    return root


# =============================================================================
# File collection
# =============================================================================


class TestCollectSchemaFiles:
    """Tests for collect_schema_files."""

    def test_single_file(self, schema_file):
        assert collect_schema_files(str(schema_file)) == [str(schema_file)]

    def test_directory_is_walked(self, schema_dir):
        files = collect_schema_files(str(schema_dir))
        assert [f.rsplit("/", 1)[-1] for f in files] == ["base.graphqls", "extra.graphql"]

    def test_other_extensions_are_ignored(self, tmp_path):
        path = tmp_path / "schema.txt"
        path.write_text("type Query { a: Int }")
        assert collect_schema_files(str(path)) == []


# =============================================================================
# Commands
# =============================================================================


class TestBuildCommand:
    """Tests for the build command."""

    def test_summary(self, runner, schema_file):
        result = runner.invoke(main, ["build", "--schema", str(schema_file)])
        assert result.exit_code == 0, result.output
        assert "Composed 2 types." in result.output
        assert "Objects: 1" in result.output
        assert "Enums: 1" in result.output

    def test_print_sdl(self, runner, schema_file):
        result = runner.invoke(main, ["build", "-s", str(schema_file), "--print"])
        assert result.exit_code == 0, result.output
        assert "enum Color {" in result.output
        assert "favorite: Color" in result.output

    def test_extensions_across_files(self, runner, schema_dir):
        result = runner.invoke(main, ["build", "-s", str(schema_dir), "--print"])
        assert result.exit_code == 0, result.output
        assert "hello: String" in result.output
        assert "world: Int" in result.output

    def test_missing_query_is_reported(self, runner, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text("enum Color { RED }")
        result = runner.invoke(main, ["build", "-s", str(path)])
        assert result.exit_code == 1
        assert "Query" in result.output

    def test_custom_query_root(self, runner, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text("type Root { ok: Boolean }")
        result = runner.invoke(main, ["build", "-s", str(path), "--query", "Root"])
        assert result.exit_code == 0, result.output
        assert "Query: Root" in result.output

    def test_default_scalars(self, runner, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text("type Query { now: DateTime }")
        result = runner.invoke(main, ["build", "-s", str(path), "--default-scalars"])
        assert result.exit_code == 0, result.output
        assert "Scalars: 5" in result.output

    def test_empty_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["build", "-s", str(tmp_path)])
        assert result.exit_code == 1
        assert "No .graphql or .graphqls files" in result.output

    def test_syntax_error_is_reported(self, runner, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text("type Query {")
        result = runner.invoke(main, ["build", "-s", str(path)])
        assert result.exit_code == 1
        assert "Cannot parse SDL" in result.output


class TestWrappedCommand:
    """Tests for the wrapped command."""

    def test_resolves_wrapped_type(self, runner, schema_file):
        result = runner.invoke(main, ["wrapped", "-s", str(schema_file), "[Color!]"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "[Color!]"

    def test_unknown_type(self, runner, schema_file):
        result = runner.invoke(main, ["wrapped", "-s", str(schema_file), "[Colour]"])
        assert result.exit_code == 1
        assert "Colour" in result.output
