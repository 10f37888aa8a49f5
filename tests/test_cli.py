# =============================================================================
# test_cli.py - Command-Line Tool Tests
# =============================================================================
# Tests for the ksparse and kslex commands, run through click's CliRunner.
# =============================================================================

import json

from click.testing import CliRunner

from kscope.cli.errors import ExitCode
from kscope.cli.kslex import main as kslex_main
from kscope.cli.ksparse import main as ksparse_main


class TestKsparse:
    """Test the ksparse command."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(ksparse_main, ["--help"])
        assert result.exit_code == 0
        assert "Parse kscope source" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(ksparse_main, ["--version"])
        assert result.exit_code == 0
        assert "ksparse" in result.output
        assert "1.0.0" in result.output

    def test_parse_stdin(self):
        runner = CliRunner()
        result = runner.invoke(ksparse_main, input="1+2*3\n")
        assert result.exit_code == 0
        assert "Function: __anon_expr()" in result.output
        assert "Binary '+'" in result.output
        assert "Binary '*'" in result.output

    def test_parse_file(self, tmp_path):
        source = tmp_path / "prog.ks"
        source.write_text("# square\ndef sq(x) x*x\nextern sin(a)\n")

        runner = CliRunner()
        result = runner.invoke(ksparse_main, [str(source)])

        assert result.exit_code == 0
        assert "Function: sq(x)" in result.output
        assert "Extern: sin(a)" in result.output

    def test_syntax_error_exit_code(self, tmp_path):
        source = tmp_path / "bad.ks"
        source.write_text("def foo(x y\n")

        runner = CliRunner()
        result = runner.invoke(ksparse_main, [str(source)])

        assert result.exit_code == ExitCode.SYNTAX_ERROR
        assert "Expected ')' in prototype" in result.output

    def test_json_report(self, tmp_path):
        source = tmp_path / "prog.ks"
        source.write_text("def id(x) x; id(4)")
        out = tmp_path / "out.json"

        runner = CliRunner()
        result = runner.invoke(ksparse_main, ["--json", str(source), "-o", str(out)])

        assert result.exit_code == 0
        entries = json.loads(out.read_text())
        assert [e["type"] for e in entries] == ["tok_def", "expression"]
        assert entries[1]["body"] == {
            "kind": "call",
            "callee": "id",
            "args": [{"kind": "number", "value": 4.0}],
        }

    def test_json_report_includes_errors(self, tmp_path):
        source = tmp_path / "bad.ks"
        source.write_text(")")
        out = tmp_path / "out.json"

        runner = CliRunner()
        result = runner.invoke(ksparse_main, ["--json", str(source), "-o", str(out)])

        assert result.exit_code == ExitCode.SYNTAX_ERROR
        entries = json.loads(out.read_text())
        assert entries[0]["type"] == "error"
        assert entries[0]["location"] == f"{source}:1:1"

    def test_binop_option(self):
        runner = CliRunner()
        result = runner.invoke(ksparse_main, ["-b", "^=50"], input="2^3")
        assert result.exit_code == 0
        assert "Binary '^'" in result.output

    def test_unknown_operator_without_binop(self):
        """Without -b, '^' is not an operator and starts a failing unit."""
        runner = CliRunner()
        result = runner.invoke(ksparse_main, input="2^3")
        assert result.exit_code == ExitCode.SYNTAX_ERROR

    def test_invalid_binop(self):
        runner = CliRunner()
        result = runner.invoke(ksparse_main, ["-b", "^^"], input="1")
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_input_file(self):
        runner = CliRunner()
        result = runner.invoke(ksparse_main, ["does-not-exist.ks"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_no_prompt_when_not_interactive(self):
        runner = CliRunner()
        result = runner.invoke(ksparse_main, input="1")
        assert "ready>" not in result.output


class TestKslex:
    """Test the kslex command."""

    def test_tokens(self):
        runner = CliRunner()
        result = runner.invoke(kslex_main, input="def foo(x) x+4")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "tok_def 'def' 1:1",
            "tok_identifier 'foo' 1:5",
            "'(' 1:8",
            "tok_identifier 'x' 1:9",
            "')' 1:10",
            "tok_identifier 'x' 1:12",
            "'+' 1:13",
            "tok_number 4.0 1:14",
            "tok_eof 1:15",
        ]

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(kslex_main, ["--version"])
        assert result.exit_code == 0
        assert "kslex" in result.output
