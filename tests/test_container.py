import importlib

from face_attendance.container import build_extractor
from face_attendance.faces.extractor import DemoFeatureExtractor, SimulatedFeatureExtractor


def test_production_defaults_to_simulated_extractor(monkeypatch):
    monkeypatch.delenv("FEATURE_EXTRACTOR", raising=False)
    settings = importlib.reload(importlib.import_module("config.production"))

    assert settings.FEATURE_EXTRACTOR == "simulated"
    assert isinstance(build_extractor(settings), SimulatedFeatureExtractor)


def test_testing_settings_use_demo_extractor():
    settings = importlib.import_module("config.testing")
    assert isinstance(build_extractor(settings), DemoFeatureExtractor)
