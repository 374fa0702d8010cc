from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from labelcheck.domain.errors import ComplianceRunFailed
from labelcheck.domain.model import CheckerName, DatasetName
from labelcheck.ui import cli as cli_module

if TYPE_CHECKING:
    from pathlib import Path


def test_check_passes_ingredients_and_statement(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_check(ingredients: list[str], **kwargs: object) -> str:
        captured["ingredients"] = ingredients
        captured.update(kwargs)
        return "result"

    monkeypatch.setattr(cli_module, "check_ingredients", fake_check)
    monkeypatch.setattr(cli_module, "to_payload", lambda value: {"value": value})

    cli_module.main(["check", "Whey", "Sugar", "--allergen-statement", "Contains: Milk"])

    assert captured["ingredients"] == ["Whey", "Sugar"]
    assert captured["declared_allergen_statement"] == "Contains: Milk"
    assert captured["store_kind"] == "rest"
    assert json.loads(capsys.readouterr().out) == {"value": "result"}


def test_check_reads_ingredients_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, object] = {}

    def fake_check(ingredients: list[str], **kwargs: object) -> str:
        captured["ingredients"] = ingredients
        captured.update(kwargs)
        return "result"

    monkeypatch.setattr(cli_module, "check_ingredients", fake_check)
    monkeypatch.setattr(cli_module, "to_payload", lambda _: {})
    path = tmp_path / "ingredients.txt"
    path.write_text("Whey Protein Isolate\n\n  Natural Flavor  \n", encoding="utf-8")

    cli_module.main(["check", "Sugar", "--ingredients-file", str(path), "--store", "sql"])

    assert captured["ingredients"] == ["Sugar", "Whey Protein Isolate", "Natural Flavor"]
    assert captured["declared_allergen_statement"] is None
    assert captured["store_kind"] == "sql"


def test_check_without_ingredients_exits_with_validation_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(cli_module, "check_ingredients", lambda *_, **__: None)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check"])

    assert excinfo.value.code == 2


def test_check_with_missing_file_exits_with_validation_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check", "--ingredients-file", str(tmp_path / "missing.txt")])

    assert excinfo.value.code == 2


def test_total_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_check(*_: object, **__: object) -> None:
        raise ComplianceRunFailed({name: "down" for name in CheckerName})

    monkeypatch.setattr(cli_module, "check_ingredients", failing_check)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check", "Sugar"])

    assert excinfo.value.code == 1


def test_warm_selected_datasets(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_warm(datasets: list[DatasetName] | None, **kwargs: object) -> dict[str, str]:
        captured["datasets"] = datasets
        captured.update(kwargs)
        return {"gras_ingredients": "stats"}

    monkeypatch.setattr(cli_module, "warm_reference_data", fake_warm)
    monkeypatch.setattr(cli_module, "to_payload", lambda value: {"stats": value})

    cli_module.main(["warm", "--dataset", "gras_ingredients", "--dataset", "major_allergens"])

    assert captured["datasets"] == [DatasetName.GRAS, DatasetName.ALLERGENS]
    assert captured["store_kind"] == "rest"
    assert json.loads(capsys.readouterr().out) == {"gras_ingredients": {"stats": "stats"}}


def test_warm_defaults_to_all_datasets(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_warm(datasets: list[DatasetName] | None, **_: object) -> dict[str, str]:
        captured["datasets"] = datasets
        return {}

    monkeypatch.setattr(cli_module, "warm_reference_data", fake_warm)

    cli_module.main(["warm"])

    assert captured["datasets"] is None


def test_unknown_store_is_rejected_by_argparse() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check", "Sugar", "--store", "ftp"])

    assert excinfo.value.code == 2


def test_version_flag_prints_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip().endswith(cli_module.__version__)
