import importlib.util
import os

import dependencies

FUNCTIONS_MAIN = os.path.join(os.path.dirname(__file__), "..", "functions", "main.py")


def load_functions_module():
    spec = importlib.util.spec_from_file_location("ecopilot_functions_main", FUNCTIONS_MAIN)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_services_are_built_at_cold_start(monkeypatch, services):
    calls = []
    monkeypatch.setattr(dependencies, "build_services", lambda settings: calls.append(settings) or services)

    module = load_functions_module()

    assert module.services is services
    assert len(calls) == 1


def test_snapshot_dict(monkeypatch, services):
    from conftest import FakeSnapshot
    monkeypatch.setattr(dependencies, "build_services", lambda settings: services)
    module = load_functions_module()

    assert module._snapshot_dict(None) is None
    assert module._snapshot_dict(FakeSnapshot("u1", None)) is None
    assert module._snapshot_dict(FakeSnapshot("u1", {"streak": 3})) == {"streak": 3}
