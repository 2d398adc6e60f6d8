import pandas as pd
import pytest

from main import main


@pytest.fixture
def cli_setup(tmp_path):
    """Edge list of two weighted triangles and an output directory."""
    edges = "1 2 3\n2 3 3\n1 3 3\n4 5 3\n5 6 3\n4 6 3\n3 4 1\n"
    edges_file = tmp_path / "edges.txt"
    edges_file.write_text(edges, encoding="utf-8")
    return str(edges_file), str(tmp_path / "out")


def test_cli_writes_partition(cli_setup):
    edges_file, output_dir = cli_setup

    main(["--data", edges_file, "--output", output_dir, "--seed", "3", "--stability", "2"])

    df = pd.read_csv(f"{output_dir}/communities.csv", dtype={"vertex": str})
    assert len(df) == 6
    assert df["community"].nunique() == 2
    groups = {frozenset(g["vertex"]) for _, g in df.groupby("community")}
    assert groups == {frozenset({"1", "2", "3"}), frozenset({"4", "5", "6"})}


def test_cli_missing_data(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--data", str(tmp_path / "nope.txt"), "--output", str(tmp_path)])

    assert exc.value.code == 1


def test_cli_bad_resolution(cli_setup):
    edges_file, output_dir = cli_setup

    with pytest.raises(SystemExit) as exc:
        main(
            ["--data", edges_file, "--output", output_dir,
             "--metric", "resolution", "--resolution", "2.0"]
        )

    assert exc.value.code == 1
