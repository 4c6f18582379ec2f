import json
import logging

import pytest

from foamest.document import (
    DOCUMENT_VERSION,
    load_document,
    migrate_document,
    save_document,
    state_from_document,
    state_to_document,
    validate_document,
)
from foamest.errors import DocumentError
from foamest.models import CLOSED_CELL, GENERAL, OPEN_CELL, ROOF_DECK


def test_load_sample_document(sample_document):
    state = load_document(sample_document)
    assert state.metadata.customer_name == "Dana Henderson"
    assert [area.name for area in state.areas] == ["Attic roof deck", "Exterior walls", "Garage gables"]
    walls = state.area(2)
    assert [app.foam_type for app in walls.foam_applications] == [CLOSED_CELL, OPEN_CELL]
    assert state.actuals.actual_labor_hours == 18.5
    assert state.actuals.actual_open_gallons is None
    assert state.actuals.actual_closed_gallons == 60


def test_legacy_document_is_migrated(legacy_document, caplog):
    with caplog.at_level(logging.INFO, logger="foamest.document"):
        state = load_document(legacy_document)

    assert "Migrated estimate document" in caplog.text
    roof, walls = state.areas
    assert roof.area_type == ROOF_DECK
    assert roof.roof_pitch == "4/12"
    assert (roof.length, roof.width) == (30, 20)
    (roof_app,) = roof.foam_applications
    assert roof_app.foam_type == CLOSED_CELL
    assert roof_app.foam_thickness == 1.5
    assert roof_app.material_markup == 60

    assert walls.area_type == GENERAL
    assert walls.area_sqft == 900
    (wall_app,) = walls.foam_applications
    assert wall_app.foam_type == OPEN_CELL
    assert wall_app.foam_thickness == 6
    assert wall_app.material_markup == 75
    assert wall_app.id != roof_app.id

    assert state.global_inputs.labor_hours == 8
    assert state.global_inputs.waste_disposal == 0
    assert state.actuals.actual_labor_hours is None
    assert state.actuals.actual_closed_gallons == 22


def test_migrated_document_validates(legacy_document):
    raw = json.loads(legacy_document.read_text(encoding="utf-8"))
    doc = migrate_document(raw)
    assert doc["version"] == DOCUMENT_VERSION
    validate_document(doc)


def test_document_round_trip(sample_document):
    state = load_document(sample_document)
    assert state_from_document(state_to_document(state)) == state


def test_save_and_load(tmp_path, sample_document):
    state = load_document(sample_document)
    target = save_document(state, tmp_path / "nested" / "job.json")
    assert target.exists()
    assert json.loads(target.read_text(encoding="utf-8"))["version"] == DOCUMENT_VERSION
    assert load_document(target) == state


def test_newer_version_is_refused():
    with pytest.raises(DocumentError, match="newer"):
        migrate_document({"version": DOCUMENT_VERSION + 1, "areas": []})


def test_non_object_documents_are_refused():
    with pytest.raises(DocumentError):
        state_from_document([1, 2, 3])
    with pytest.raises(DocumentError):
        migrate_document({"version": 2, "areas": ["not an area"]})


def test_schema_violations_are_listed():
    with pytest.raises(DocumentError) as excinfo:
        validate_document(
            {
                "version": 2,
                "estimate": {},
                "globalInputs": {},
                "actuals": {},
                "areas": [{"id": 1, "name": "x", "areaType": "Basement", "foamApplications": []}],
            }
        )
    message = str(excinfo.value)
    assert "areas/0/areaType" in message
    assert "areas/0/foamApplications" in message


def test_invalid_json_raises_document_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{ not json", encoding="utf-8")
    with pytest.raises(DocumentError):
        load_document(path)


def test_duplicate_application_ids_are_reallocated():
    app = {"id": 7, "foamType": "Open"}
    doc = migrate_document(
        {
            "version": 2,
            "areas": [
                {"id": 1, "name": "A", "foamApplications": [app]},
                {"id": 1, "name": "B", "foamApplications": [dict(app)]},
            ],
        }
    )
    assert [area["id"] for area in doc["areas"]] == [1, 2]
    assert [area["foamApplications"][0]["id"] for area in doc["areas"]] == [7, 8]


@pytest.mark.parametrize("stored, expected", [("false", False), ("False", False), ("0", False), ("true", True), (True, True)])
def test_pitch_opt_in_strings_are_parsed(stored, expected):
    doc = migrate_document(
        {"areas": [{"id": 1, "name": "Roof", "areaType": "Roof Deck", "areaSqFt": "500", "applyPitchToManualArea": stored}]}
    )
    assert doc["areas"][0]["applyPitchToManualArea"] is expected
