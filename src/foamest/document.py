"""Versioned JSON documents for saved estimates.

Documents keep the camelCase keys written by the estimator front end. Version 1
saves stored one foam layer per area as scalar fields (``foamType``,
``foamThickness`` ...); :func:`migrate_document` folds those into a single
``foamApplications`` entry so older files keep loading.
"""

from __future__ import annotations

import copy
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping

from jsonschema import Draft7Validator

from .errors import DocumentError
from .foam import FOAM_DEFAULTS
from .models import (
    GENERAL,
    OPEN_CELL,
    Actuals,
    Area,
    EstimateMetadata,
    FoamApplication,
    GlobalInputs,
    normalize_area_type,
    normalize_foam_type,
)
from .numeric import coerce_non_negative, coerce_optional, to_flag
from .state import EstimateState, normalize_area

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = 2
SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "estimate.schema.json"

METADATA_KEYS = {
    "job_name": "jobName",
    "customer_name": "customerName",
    "customer_email": "customerEmail",
    "customer_phone": "customerPhone",
    "job_address": "jobAddress",
    "estimate_date": "estimateDate",
    "notes": "notes",
}
GLOBAL_INPUT_KEYS = {
    "labor_hours": "laborHours",
    "manual_labor_rate": "manualLaborRate",
    "labor_markup": "laborMarkup",
    "travel_distance": "travelDistance",
    "travel_rate": "travelRate",
    "waste_disposal": "wasteDisposal",
    "equipment_rental": "equipmentRental",
}
AREA_NUMERIC_KEYS = {
    "area_sqft": "areaSqFt",
    "length": "length",
    "width": "width",
}
APPLICATION_KEYS = {
    "foam_thickness": "foamThickness",
    "material_price": "materialPrice",
    "material_markup": "materialMarkup",
    "board_feet_per_set": "boardFeetPerSet",
}
ACTUAL_KEYS = {
    "actual_labor_hours": "actualLaborHours",
    "actual_open_gallons": "actualOpenGallons",
    "actual_closed_gallons": "actualClosedGallons",
}


@lru_cache(maxsize=1)
def _validator() -> Draft7Validator:
    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        schema = json.load(f)
    return Draft7Validator(schema)


def validate_document(doc: Mapping[str, Any]) -> None:
    """Raise :class:`DocumentError` listing every schema violation in ``doc``."""

    errors = sorted(_validator().iter_errors(doc), key=lambda err: list(err.path))
    if errors:
        details = "; ".join(
            f"{'/'.join(str(part) for part in err.path) or '<root>'}: {err.message}" for err in errors
        )
        raise DocumentError(f"Invalid estimate document: {details}")


def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return None


def _migrate_application(raw: Mapping[str, Any], app_id: int) -> Dict[str, Any]:
    foam_type = normalize_foam_type(raw.get("foamType")) or OPEN_CELL
    defaults = FOAM_DEFAULTS[foam_type]
    app: Dict[str, Any] = {"id": app_id, "foamType": foam_type}
    for field_name, key in APPLICATION_KEYS.items():
        value = raw.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            app[key] = defaults[field_name]
        else:
            app[key] = coerce_non_negative(value)
    return app


class _IdAllocator:
    """Keeps saved ids where they are unique and hands out fresh ones otherwise."""

    def __init__(self) -> None:
        self.used: set[int] = set()

    def allocate(self, candidate: object = None) -> int:
        value = _as_int(candidate)
        if value is None or value in self.used:
            value = max(self.used, default=0) + 1
        self.used.add(value)
        return value


def _migrate_area(raw: Mapping[str, Any], area_id: int, app_ids: _IdAllocator) -> Dict[str, Any]:
    area: Dict[str, Any] = {
        "id": area_id,
        "name": str(raw.get("name") or f"Area {area_id}"),
        "areaType": normalize_area_type(raw.get("areaType")) or GENERAL,
        "roofPitch": str(raw.get("roofPitch") or "4/12").strip(),
        "applyPitchToManualArea": to_flag(raw.get("applyPitchToManualArea")),
    }
    for key in AREA_NUMERIC_KEYS.values():
        area[key] = coerce_non_negative(raw.get(key))

    applications = raw.get("foamApplications")
    if isinstance(applications, list) and applications:
        migrated = []
        for app in applications:
            if not isinstance(app, Mapping):
                raise DocumentError(f"Foam application in area {area['name']!r} is not a JSON object")
            migrated.append(_migrate_application(app, app_ids.allocate(app.get("id"))))
        area["foamApplications"] = migrated
    else:
        logger.debug("Synthesizing foam application for legacy area %s", area["name"])
        area["foamApplications"] = [_migrate_application(raw, app_ids.allocate())]
    return area


def migrate_document(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of ``raw`` upgraded to :data:`DOCUMENT_VERSION`.

    Numeric strings are coerced, legacy area type spellings are normalized and
    areas without ``foamApplications`` receive one built from their scalar foam
    fields (falling back to the foam type's defaults).
    """

    if not isinstance(raw, Mapping):
        raise DocumentError("Estimate document must be a JSON object")
    version = _as_int(raw.get("version", 1))
    if version is None or version < 1:
        raise DocumentError(f"Unsupported estimate document version {raw.get('version')!r}")
    if version > DOCUMENT_VERSION:
        raise DocumentError(
            f"Estimate document version {version} is newer than supported version {DOCUMENT_VERSION}"
        )

    source = copy.deepcopy(dict(raw))
    metadata = source.get("estimate") or {}
    inputs = source.get("globalInputs") or {}
    actuals = source.get("actuals") or {}

    doc: Dict[str, Any] = {
        "version": DOCUMENT_VERSION,
        "estimate": {key: str(metadata.get(key) or "") for key in METADATA_KEYS.values()},
        "globalInputs": {key: coerce_non_negative(inputs.get(key)) for key in GLOBAL_INPUT_KEYS.values()},
        "actuals": {key: coerce_optional(actuals.get(key)) for key in ACTUAL_KEYS.values()},
    }

    area_ids = _IdAllocator()
    app_ids = _IdAllocator()
    areas: List[Dict[str, Any]] = []
    for index, area in enumerate(source.get("areas") or [], start=1):
        if not isinstance(area, Mapping):
            raise DocumentError(f"Area #{index} is not a JSON object")
        areas.append(_migrate_area(area, area_ids.allocate(area.get("id")), app_ids))
    doc["areas"] = areas

    if version < DOCUMENT_VERSION:
        logger.info("Migrated estimate document from version %s to %s", version, DOCUMENT_VERSION)
    return doc


def _area_from_document(area: Mapping[str, Any]) -> Area:
    applications = tuple(
        FoamApplication(
            id=app["id"],
            foam_type=app["foamType"],
            **{name: float(app[key]) for name, key in APPLICATION_KEYS.items()},
        )
        for app in area["foamApplications"]
    )
    return Area(
        id=area["id"],
        name=area["name"],
        foam_applications=applications,
        area_type=area["areaType"],
        roof_pitch=area["roofPitch"],
        apply_pitch_to_manual_area=area["applyPitchToManualArea"],
        **{name: float(area[key]) for name, key in AREA_NUMERIC_KEYS.items()},
    )


def state_from_document(raw: Mapping[str, Any]) -> EstimateState:
    doc = migrate_document(raw)
    validate_document(doc)
    metadata = EstimateMetadata(**{name: doc["estimate"][key] for name, key in METADATA_KEYS.items()})
    inputs = GlobalInputs(**{name: doc["globalInputs"][key] for name, key in GLOBAL_INPUT_KEYS.items()})
    actuals = Actuals(**{name: doc["actuals"][key] for name, key in ACTUAL_KEYS.items()})
    areas = tuple(normalize_area(_area_from_document(area)) for area in doc["areas"])
    return EstimateState(metadata=metadata, global_inputs=inputs, areas=areas, actuals=actuals)


def state_to_document(state: EstimateState) -> Dict[str, Any]:
    return {
        "version": DOCUMENT_VERSION,
        "estimate": {key: getattr(state.metadata, name) for name, key in METADATA_KEYS.items()},
        "globalInputs": {key: getattr(state.global_inputs, name) for name, key in GLOBAL_INPUT_KEYS.items()},
        "areas": [
            {
                "id": area.id,
                "name": area.name,
                **{key: getattr(area, name) for name, key in AREA_NUMERIC_KEYS.items()},
                "areaType": area.area_type,
                "roofPitch": area.roof_pitch,
                "applyPitchToManualArea": area.apply_pitch_to_manual_area,
                "foamApplications": [
                    {
                        "id": app.id,
                        "foamType": app.foam_type,
                        **{key: getattr(app, name) for name, key in APPLICATION_KEYS.items()},
                    }
                    for app in area.foam_applications
                ],
            }
            for area in state.areas
        ],
        "actuals": {key: getattr(state.actuals, name) for name, key in ACTUAL_KEYS.items()},
    }


def load_document(path: Path) -> EstimateState:
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise DocumentError(f"{path} is not valid JSON: {exc}") from exc
    return state_from_document(raw)


def save_document(state: EstimateState, path: Path) -> Path:
    target = Path(path).expanduser().resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        json.dump(state_to_document(state), f, indent=2)
    return target


__all__ = [
    "DOCUMENT_VERSION",
    "validate_document",
    "migrate_document",
    "state_from_document",
    "state_to_document",
    "load_document",
    "save_document",
]
