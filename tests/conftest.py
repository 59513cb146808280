"""Shared fixtures for diagnose tests."""

import copy
import json
from unittest.mock import MagicMock

import pytest

from app.agent.diagnostic_agent import DiagnosticAgent
from app.agent.llm import GroqTextGenerator
from app.config import Settings


def bilingual(en: str, es: str) -> dict:
    return {"en": en, "es": es}


def make_step(n: int, total: int) -> dict:
    """Build step-n; passing moves on, failing ends the procedure."""
    return {
        "id": f"step-{n}",
        "title": bilingual(f"Check {n}", f"Revisión {n}"),
        "purpose": bilingual("Narrow down the fault", "Acotar la falla"),
        "procedure": {
            "en": ["Key on, engine off", "Measure the signal"],
            "es": ["Llave en ON, motor apagado", "Medir la señal"],
        },
        "connectorHints": [
            {
                "label": bilingual("O2 sensor 2", "Sensor O2 2"),
                "test": bilingual("Signal voltage", "Voltaje de señal"),
                "expectedRange": "0.1-0.9",
                "estimated": True,
                "notes": bilingual(
                    "Estimated. Refer to OEM wiring diagram (OEM/Alldata/Mitchell) if available.",
                    "Estimado. Consulte el diagrama OEM (OEM/Alldata/Mitchell) si está disponible.",
                ),
            }
        ],
        "passCriteria": {"en": ["Reading in range"], "es": ["Lectura en rango"]},
        "failCriteria": {"en": ["Reading out of range"], "es": ["Lectura fuera de rango"]},
        "nextOnPass": f"step-{n + 1}" if n < total else None,
        "nextOnFail": None,
    }


def make_plan(steps: int = 5, session_id: str = "") -> dict:
    return {
        "version": "1.0",
        "language": "en",
        "vehicle": {
            "make": "Honda",
            "model": "Civic",
            "year": "2015",
            "engine": "1.8L",
            "vin": "",
            "mileage": "",
        },
        "concern": {"dtcs": ["P0420"], "symptom": "Check engine light on", "notes": ""},
        "overview": bilingual("Catalyst efficiency below threshold.", "Eficiencia del catalizador bajo el umbral."),
        "disclaimers": bilingual("Specs are estimated.", "Las especificaciones son estimadas."),
        "safetyNotes": {"en": ["Let the exhaust cool."], "es": ["Deje enfriar el escape."]},
        "specs": {
            "labeledAsEstimated": True,
            "items": [
                {
                    "name": bilingual("Downstream O2 voltage", "Voltaje O2 posterior"),
                    "expectedRange": "0.5-0.8",
                    "unit": "V",
                    "note": bilingual("estimated", "estimado"),
                    "estimated": True,
                }
            ],
        },
        "steps": [make_step(n, steps) for n in range(1, steps + 1)],
        "firstStepId": "step-1",
        "sessionId": session_id,
    }


@pytest.fixture
def plan_dict():
    """A valid five-step plan as the model would return it."""
    return make_plan()


@pytest.fixture
def plan_json(plan_dict):
    return json.dumps(plan_dict)


@pytest.fixture
def broken_plan_json(plan_dict):
    """Plan with step-1 missing its id."""
    broken = copy.deepcopy(plan_dict)
    del broken["steps"][0]["id"]
    return json.dumps(broken)


@pytest.fixture
def request_payload():
    return {
        "make": "Honda",
        "model": "Civic",
        "year": "2015",
        "engine": "1.8L",
        "dtcs": ["P0420"],
        "symptom": "Check engine light on",
        "notes": "",
        "language": "en",
    }


@pytest.fixture
def settings():
    return Settings(groq_api_key="test-key", groq_model="test-model")


@pytest.fixture
def mock_generator():
    """Generator whose replies are set per test via side_effect."""
    return MagicMock(spec=GroqTextGenerator)


@pytest.fixture
def agent(settings, mock_generator):
    return DiagnosticAgent(settings, generator=mock_generator)
