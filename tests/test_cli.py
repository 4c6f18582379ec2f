import json
import shutil

import pytest

from foamest import cli


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("FOAMEST_SETTINGS", "FOAMEST_OUTPUT_DIR", "FOAMEST_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


def test_cli_writes_breakdown_and_quote(tmp_path, sample_document, settings_yaml):
    breakdown = tmp_path / "out" / "breakdown.csv"
    quote = tmp_path / "out" / "quote.json"
    exit_code = cli.main(
        [
            str(sample_document),
            "--settings",
            str(settings_yaml),
            "--breakdown-csv",
            str(breakdown),
            "--line-items",
            str(quote),
        ]
    )
    assert exit_code == 0
    assert breakdown.exists()
    assert (tmp_path / "out" / "breakdown_comparison.csv").exists()
    payload = json.loads(quote.read_text(encoding="utf-8"))
    assert payload["client"]["name"] == "Dana Henderson"
    assert len(payload["lineItems"]) == 5


def test_output_dir_defaults_breakdown_path(tmp_path, sample_document):
    exit_code = cli.main([str(sample_document), "--output-dir", str(tmp_path)])
    assert exit_code == 0
    assert (tmp_path / "Foam_Breakdown.csv").exists()


def test_migrate_rewrites_legacy_document(tmp_path, legacy_document):
    target = tmp_path / "legacy.json"
    shutil.copy(legacy_document, target)
    assert cli.main([str(target), "--migrate"]) == 0
    doc = json.loads(target.read_text(encoding="utf-8"))
    assert doc["version"] == 2
    assert all(area["foamApplications"] for area in doc["areas"])


def test_rejected_document_exits_with_2(tmp_path):
    path = tmp_path / "future.json"
    path.write_text(json.dumps({"version": 99, "areas": []}), encoding="utf-8")
    assert cli.main([str(path)]) == 2


def test_missing_document_exits_with_2(tmp_path):
    assert cli.main([str(tmp_path / "nope.json")]) == 2


def test_output_dir_from_environment_defaults_breakdown_path(tmp_path, sample_document, monkeypatch):
    monkeypatch.setenv("FOAMEST_OUTPUT_DIR", str(tmp_path / "env_out"))
    assert cli.main([str(sample_document)]) == 0
    assert (tmp_path / "env_out" / "Foam_Breakdown.csv").exists()
