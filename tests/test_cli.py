import pytest

from hysort.cli import main, parse_args
from hysort.density import Strategy


def _args(n="4", dim="2", bins="4", min_split="0", norm="1", fname="data.csv", approach="1", tree="3"):
    return [n, dim, bins, min_split, norm, fname, approach, tree]


@pytest.fixture
def dataset(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("0.1,0.2\n0.15,0.25\n0.9,0.8\n0.12,0.22\n", encoding="utf-8")
    return path


def test_parse_args_reads_all_positions():
    args = parse_args(_args(n="10", dim="3", bins="5", min_split="2", norm="0", approach="1", tree="2"))
    assert (args.n, args.dim, args.bins, args.min_split) == (10, 3, 5, 2)
    assert args.normalize == 0
    assert args.filename == "data.csv"
    assert args.strategy is Strategy.LOCALITY_TREE
    assert args.plain is False


@pytest.mark.parametrize(
    "approach, tree, expected",
    [
        ("0", "0", Strategy.NAIVE),
        ("0", "3", Strategy.NAIVE),
        ("1", "1", Strategy.SIMPLE_TREE),
        ("1", "2", Strategy.LOCALITY_TREE),
        ("1", "3", Strategy.TRAVERSAL_TREE),
        ("1", "0", Strategy.TRAVERSAL_TREE),
    ],
)
def test_parse_args_strategy(approach, tree, expected):
    assert parse_args(_args(approach=approach, tree=tree)).strategy is expected


def test_parse_args_wrong_count_exits():
    with pytest.raises(SystemExit):
        parse_args(_args()[:-1])


@pytest.mark.parametrize(
    "overrides",
    [
        {"n": "0"},
        {"dim": "0"},
        {"bins": "0"},
        {"min_split": "-1"},
        {"norm": "2"},
        {"norm": "-1"},
        {"approach": "2"},
        {"tree": "4"},
        {"tree": "-1"},
    ],
)
def test_parse_args_invalid_values_exit(overrides, capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(_args(**overrides))
    assert info.value.code != 0
    assert "One of the following are invalid" in capsys.readouterr().err


def test_main_naive_reports(dataset, capsys):
    code = main(_args(fname=str(dataset), approach="0", tree="0"))
    out = capsys.readouterr().out
    assert code == 0
    assert "Approach: Naive Selected tree: NONE" in out
    assert "using naive approach" in out
    assert "============TIME RESULTS================" in out
    assert "Time for neighborhood density is" in out


@pytest.mark.parametrize(
    "tree, message",
    [
        ("1", "Using simple tree"),
        ("2", "Using locality optimized tree"),
        ("3", "Using locality and traversal optimized tree"),
    ],
)
def test_main_tree_strategies(dataset, capsys, tree, message):
    assert main(_args(fname=str(dataset), tree=tree)) == 0
    out = capsys.readouterr().out
    assert message in out
    assert "Approach: Tree" in out


def test_main_encoded_reports_variance(dataset, capsys):
    assert main(_args(fname=str(dataset))) == 0
    out = capsys.readouterr().out
    assert "Mean = " in out
    assert "Dimensions are" in out


def test_main_plain_skips_variance(dataset, capsys):
    assert main(_args(fname=str(dataset)) + ["--plain"]) == 0
    out = capsys.readouterr().out
    assert "Mean = " not in out
    assert "Total time for building hypercube is" in out


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "absent.csv"
    assert main(_args(fname=str(missing))) == 1
    captured = capsys.readouterr()
    assert "Unable to open file" in captured.err
    assert f"Filename: {missing}" in captured.out


def test_main_too_few_rows(dataset, capsys):
    assert main(_args(n="10", fname=str(dataset))) == 1
    assert "expected 10 rows" in capsys.readouterr().err