"""Tests for the bn-elim command line."""

import logging

import pytest

from bn_elimination.cli import main


@pytest.fixture(autouse=True)
def restore_root_level():
    root = logging.getLogger()
    previous = root.level
    yield
    root.setLevel(previous)


class TestQueryCommand:
    def test_marginal(self, capsys):
        assert main(["query", "BNA", "--query", "D:T", "--order", "A,B,C"]) == 0
        assert "P(D=T) = 0.57050" in capsys.readouterr().out

    def test_conditional(self, capsys):
        code = main(["query", "bna", "--query", "D:T", "--evidence", "A:T", "--order", "A,B,C"])
        assert code == 0
        assert "P(D=T | A=T) = 0.54200" in capsys.readouterr().out

    def test_heuristic_prints_order(self, capsys):
        assert main(["query", "BNC", "--query", "Z:T", "--ordering", "greedy", "--seed", "4"]) == 0
        out = capsys.readouterr().out
        assert "Order (greedy, seed=4):" in out
        assert "P(Z=T) = " in out

    def test_verbose_prints_history(self, capsys):
        assert main(["query", "BNA", "--query", "D:T", "--order", "A,B,C", "--verbose"]) == 0
        out = capsys.readouterr().out
        assert "after A: f(B,C), f(C,D), f(B)" in out
        assert "Joins: 3" in out

    def test_unknown_variable_exit_code(self, capsys):
        assert main(["query", "BNA", "--query", "X:T", "--order", "A"]) == 1
        assert "UnknownVariable" in capsys.readouterr().err

    def test_provided_without_order(self, capsys):
        assert main(["query", "BNA", "--query", "D:T"]) == 1
        assert "needs an explicit order" in capsys.readouterr().err

    def test_config_file(self, tmp_path, capsys):
        path = tmp_path / "inference.yaml"
        path.write_text("ordering: provided\norder: [C, B, A]\n", encoding="utf-8")
        assert main(["query", "BNA", "--query", "D:T", "--config", str(path)]) == 0
        assert "0.57050" in capsys.readouterr().out

    def test_unknown_network(self, capsys):
        assert main(["query", "BNZ", "--query", "D:T", "--order", "A"]) == 1
        assert "Unknown network" in capsys.readouterr().err


class TestOtherCommands:
    def test_show(self, capsys):
        assert main(["show", "BNB"]) == 0
        out = capsys.readouterr().out
        assert "Random Variable: M" in out
        assert "K(T)" in out

    def test_compare(self, capsys):
        assert main(["compare", "BNC", "--query", "Z:T", "--repeats", "5"]) == 0
        out = capsys.readouterr().out
        assert "max_cardinality" in out
        assert "greedy" in out
        assert "induced_width" in out
