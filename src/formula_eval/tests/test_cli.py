from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from formula_eval.cli import main
from formula_eval.config import CATALOG_ENV, LOG_LEVEL_ENV
from formula_eval.errors import FormulaError, FormulaErrorCode, MissingVariable
from formula_eval.tests.fixtures import CatalogFiles


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    return CatalogFiles(tmp_path).yaml(
        {"formulas": {"line": "a * x + d", "square": "x ^ 2"}}
    )


def test_cli_evaluates_with_assignments(catalog_path: Path, capsys) -> None:
    code = main([str(catalog_path), "--set", "a=2", "--set", "x=3", "--set", "d=1"])

    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["line = 7.0", "square = 9.0"]


def test_cli_set_overrides_bindings_file(catalog_path: Path, tmp_path: Path, capsys) -> None:
    bindings = CatalogFiles(tmp_path).json({"a": 2, "x": 3, "d": 1}, name="b.json")

    main([str(catalog_path), "--bindings", str(bindings), "--set", "x=4", "--formula", "square"])

    assert capsys.readouterr().out.strip() == "square = 16.0"


def test_cli_writes_json(catalog_path: Path, tmp_path: Path) -> None:
    out = tmp_path / "values.json"

    main([str(catalog_path), "--set", "x=2", "--formula", "square", "--out", str(out)])

    assert json.loads(out.read_text(encoding="utf-8")) == {"square": 4.0}


def test_cli_show_builtin_family(capsys) -> None:
    code = main(["--family", "hilbert", "--formula", "gw1", "--show"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "gw1: w1 ^ 7 + a * w1 ^ 3 + b * w1 ^ 2 + c * w1 + A"


def test_cli_frame_to_csv(catalog_path: Path, tmp_path: Path) -> None:
    frame_path = tmp_path / "rows.csv"
    pd.DataFrame({"a": [2, 0], "x": [3, 5], "d": [1, 4]}).to_csv(frame_path, index=False)
    out = tmp_path / "results.csv"

    main([str(catalog_path), "--frame", str(frame_path), "--out", str(out)])

    results = pd.read_csv(out)
    assert results["line"].tolist() == [7.0, 4.0]
    assert results["square"].tolist() == [9.0, 25.0]


def test_cli_uses_catalog_from_env(catalog_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setenv(CATALOG_ENV, str(catalog_path))

    main(["--set", "x=5", "--formula", "square"])

    assert capsys.readouterr().out.strip() == "square = 25.0"


def test_cli_requires_catalog(monkeypatch) -> None:
    monkeypatch.delenv(CATALOG_ENV, raising=False)

    with pytest.raises(FormulaError) as exc:
        main(["--set", "x=1"])

    assert exc.value.code is FormulaErrorCode.INVALID_CATALOG


def test_cli_unknown_formula(catalog_path: Path) -> None:
    with pytest.raises(FormulaError) as exc:
        main([str(catalog_path), "--formula", "cube"])

    assert exc.value.ctx["names"] == ["cube"]


def test_cli_missing_binding_propagates(catalog_path: Path) -> None:
    with pytest.raises(MissingVariable):
        main([str(catalog_path), "--set", "x=1"])


def test_cli_missing_frame_file(catalog_path: Path, tmp_path: Path) -> None:
    missing = tmp_path / "absent.csv"

    with pytest.raises(FormulaError) as exc:
        main([str(catalog_path), "--frame", str(missing)])

    assert exc.value.code is FormulaErrorCode.INVALID_BINDING
    assert exc.value.ctx["path"] == str(missing)


def test_cli_log_level_flag_overrides_invalid_env(catalog_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")

    code = main([str(catalog_path), "--log-level", "INFO", "--set", "x=3", "--formula", "square"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "square = 9.0"


def test_cli_invalid_env_log_level_without_flag(catalog_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")

    with pytest.raises(FormulaError) as exc:
        main([str(catalog_path), "--set", "x=3"])

    assert exc.value.code is FormulaErrorCode.INVALID_CONFIG
