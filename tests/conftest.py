from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from foamest.foam import default_application
from foamest.models import CLOSED_CELL, GENERAL, OPEN_CELL, Area, FoamApplication, GlobalInputs

DATA_SAMPLE_DIR = Path(__file__).resolve().parents[1] / "data_sample"


@pytest.fixture
def sample_document() -> Path:
    return DATA_SAMPLE_DIR / "sample_estimate.json"


@pytest.fixture
def legacy_document() -> Path:
    return DATA_SAMPLE_DIR / "legacy_estimate.json"


@pytest.fixture
def settings_yaml() -> Path:
    return DATA_SAMPLE_DIR / "business_settings.yaml"


@pytest.fixture
def open_app() -> FoamApplication:
    return default_application(1, OPEN_CELL)


@pytest.fixture
def closed_app() -> FoamApplication:
    return default_application(2, CLOSED_CELL)


@pytest.fixture
def area_factory(open_app: FoamApplication) -> Callable[..., Area]:
    def _create(area_id: int = 1, apps: tuple[FoamApplication, ...] | None = None, **fields) -> Area:
        fields.setdefault("name", f"Area {area_id}")
        fields.setdefault("area_type", GENERAL)
        return Area(id=area_id, foam_applications=apps or (open_app,), **fields)

    return _create


@pytest.fixture
def job_inputs() -> GlobalInputs:
    return GlobalInputs(
        labor_hours=10,
        manual_labor_rate=40,
        labor_markup=50,
        travel_distance=50,
        travel_rate=0.5,
        waste_disposal=25,
        equipment_rental=100,
    )
