from __future__ import annotations

"""Functional test bootstrap.

Points the application at the YAML journey fixture and gives each test a
clean journey registry so tests never see journeys registered by others.
"""

import pathlib

import pytest

from portal.config import AppConfig, JourneysConfig
from portal.logic.journey_store import clear_journeys

_ROOT = pathlib.Path(__file__).resolve().parents[2]
JOURNEY_FILE = _ROOT / "tests" / "fixtures" / "planned_end_date_journey.yaml"
JOURNEY_ID = "journey-planned-end-date"


@pytest.fixture(autouse=True)
def clean_journey_registry():
    clear_journeys()
    yield
    clear_journeys()


@pytest.fixture
def journey_file() -> pathlib.Path:
    return JOURNEY_FILE


@pytest.fixture
def client(journey_file):
    from fastapi.testclient import TestClient
    from portal.main import create_app

    app = create_app(AppConfig(journeys=JourneysConfig(path=str(journey_file))))
    return TestClient(app)
