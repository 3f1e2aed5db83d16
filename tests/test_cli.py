import csv

import pytest

from draftopt.cli import main


def _catalog_csv(tmp_path):
    path = tmp_path / "players.csv"
    path.write_text(
        "\n".join(
            [
                "player_name,position,bye_week,athletic_ppr_projected_points,week13_actual_ppr_points,adp",
                "Alpha,QB,7,100,80,1",
                "Bravo,RB,9,90,60,2",
                "Charlie,RB,9,80,95,2",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path


def _small_draft_args(tmp_path):
    return [
        str(_catalog_csv(tmp_path)),
        "--rounds", "2",
        "--teams", "1",
        "--start-slot", "1",
        "--exclude-category", "rb",
        "--exclude-category", "wr",
        "--exclude-category", "te",
        "--exclude-category", "flex",
        "--max-per-bye", "-1",
        "--output", str(tmp_path / "rosters.csv"),
    ]


def test_cli_solves_and_writes_roster(tmp_path, capsys):
    main(_small_draft_args(tmp_path) + ["--reference-metric", "week13_actual_ppr_points"])

    out = capsys.readouterr().out
    assert "Loaded 3 entities" in out
    assert "Total Projected Points:\t190" in out
    assert "attainment" in out

    with (tmp_path / "rosters.csv").open(newline="") as f:
        records = list(csv.DictReader(f))
    assert [(r["scenario"], r["round"], r["entity_id"]) for r in records] == [
        ("base", "1", "Alpha"),
        ("base", "2", "Bravo"),
    ]


def test_cli_sweep_writes_each_scenario(tmp_path, capsys):
    main(_small_draft_args(tmp_path) + ["--quiet", "--sweep-metric", "athletic_ppr_projected_points", "week13_actual_ppr_points"])

    out = capsys.readouterr().out
    assert "Total Projected Points" not in out
    with (tmp_path / "rosters.csv").open(newline="") as f:
        scenarios = {r["scenario"] for r in csv.DictReader(f)}
    assert scenarios == {"metric=athletic_ppr_projected_points", "metric=week13_actual_ppr_points"}


def test_cli_exits_non_zero_when_a_scenario_fails(tmp_path, capsys):
    args = [
        str(_catalog_csv(tmp_path)),
        "--rounds", "2",
        "--teams", "1",
        "--start-slot", "1",
        "--output", str(tmp_path / "rosters.csv"),
    ]
    with pytest.raises(SystemExit) as exc:
        main(args)
    assert exc.value.code == 1
    assert "failed" in capsys.readouterr().out


def test_cli_rejects_unknown_format(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(_catalog_csv(tmp_path)), "--format", "dynasty"])
    assert exc.value.code == 2
    assert "dynasty" in capsys.readouterr().err


def test_cli_loads_metric_and_proxy_columns_it_selects(tmp_path, capsys):
    path = tmp_path / "custom.csv"
    path.write_text(
        "\n".join(
            [
                "player_name,position,bye_week,my_proj,alt_proj,my_rank",
                "Alpha,QB,7,100,50,1",
                "Bravo,RB,9,90,70,2",
                "Charlie,RB,9,80,75,2",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    args = _small_draft_args(tmp_path)
    args[0] = str(path)
    main(args + ["--metric", "my_proj", "--proxy", "my_rank", "--reference-metric", "alt_proj"])

    out = capsys.readouterr().out
    assert "Total Projected Points:\t190" in out
    assert "attainment" in out
    with (tmp_path / "rosters.csv").open(newline="") as f:
        records = list(csv.DictReader(f))
    assert [(r["entity_id"], r["metric"]) for r in records] == [("Alpha", "my_proj"), ("Bravo", "my_proj")]


def test_cli_rejects_selected_metric_missing_from_catalog(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(_small_draft_args(tmp_path) + ["--sweep-metric", "pff_ppr_projected_points"])
    assert exc.value.code == 2
    assert "pff_ppr_projected_points" in capsys.readouterr().err
