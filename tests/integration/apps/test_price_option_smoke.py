from __future__ import annotations

import importlib

import pytest

APP = "lattice_pricing.apps.price_option"

BASE_ARGS = [
    "--valuation-date",
    "2025-01-02",
    "--expiry",
    "2026-01-02",
    "--log-level",
    "WARNING",
    "--no-color",
]


@pytest.mark.integration
def test_price_option_help_exits_cleanly(run_help) -> None:
    mod = importlib.import_module(APP)
    run_help(mod, "Price a vanilla option on a binomial lattice")


@pytest.mark.integration
def test_price_option_print_config_outputs_json(
    run_print_config, example_config, assert_paths_exist
) -> None:
    mod = importlib.import_module(APP)
    cfg = run_print_config(mod, example_config)

    assert_paths_exist(
        cfg,
        [
            ("logging", "level"),
            ("market", "rate", "2026-01-02"),
            ("option", "exercise"),
            ("engine", "steps"),
            ("report", "convergence_steps"),
        ],
    )
    assert cfg["engine"] == {"tree": "crr", "steps": 200}


@pytest.mark.integration
def test_price_option_cli_overrides_yaml(run_print_config, example_config) -> None:
    mod = importlib.import_module(APP)
    cfg = run_print_config(
        mod,
        example_config,
        "--tree",
        "tian",
        "--steps",
        "64",
        "--option-type",
        "put",
        "--exercise",
        "bermudan",
        "--exercise-dates",
        "2025-04-02",
        "2025-07-02",
    )

    assert cfg["engine"] == {"tree": "tian", "steps": 64}
    assert cfg["option"]["type"] == "put"
    assert cfg["option"]["exercise_dates"] == ["2025-04-02", "2025-07-02"]
    assert cfg["option"]["strike"] == 100.0


@pytest.mark.integration
def test_price_option_prints_result_close_to_benchmark(
    capsys, parse_printed_config
) -> None:
    mod = importlib.import_module(APP)
    mod.main([*BASE_ARGS, "--steps", "400", "--convergence-steps", "25", "50"])

    out = parse_printed_config(capsys.readouterr().out)
    result, bench = out["result"], out["benchmark"]

    assert out["valuation_date"].startswith("2025-01-02")
    assert out["tree"] == "crr"
    assert out["steps"] == 400
    assert result["value"] == pytest.approx(bench["value"], abs=0.01)
    assert result["delta"] == pytest.approx(bench["delta"], abs=5e-3)
    assert [row["steps"] for row in out["convergence"]] == [25, 50]


@pytest.mark.integration
def test_price_option_reads_term_structures_from_yaml(
    capsys, parse_printed_config, example_config
) -> None:
    mod = importlib.import_module(APP)
    mod.main(["--config", example_config, "--log-level", "WARNING", "--no-color"])

    out = parse_printed_config(capsys.readouterr().out)
    assert out["steps"] == 200
    assert out["result"]["value"] == pytest.approx(out["benchmark"]["value"], abs=0.02)
    assert [row["steps"] for row in out["convergence"]] == [50, 100, 200, 400]


@pytest.mark.integration
def test_price_option_bermudan_put_has_no_benchmark(capsys, parse_printed_config) -> None:
    mod = importlib.import_module(APP)
    mod.main(
        [
            *BASE_ARGS,
            "--option-type",
            "put",
            "--strike",
            "110",
            "--exercise",
            "bermudan",
            "--exercise-dates",
            "2025-07-02",
        ]
    )

    out = parse_printed_config(capsys.readouterr().out)
    assert "benchmark" not in out
    assert out["result"]["value"] > 10.0


@pytest.mark.integration
def test_price_option_bermudan_without_dates_fails(capsys) -> None:
    mod = importlib.import_module(APP)
    with pytest.raises(ValueError, match="exercise_dates"):
        mod.main([*BASE_ARGS, "--exercise", "bermudan"])


@pytest.mark.integration
def test_price_option_dry_run_does_not_price(monkeypatch, capsys) -> None:
    mod = importlib.import_module(APP)

    def _calculate(*args, **kwargs):
        raise AssertionError("calculate() should not be called during --dry-run")

    monkeypatch.setattr(mod.BinomialVanillaEngine, "calculate", _calculate)

    mod.main([*BASE_ARGS, "--dry-run"])

    assert capsys.readouterr().out == ""
