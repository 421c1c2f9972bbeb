from contextlib import nullcontext
from typing import Any, Dict, List, Tuple

import pytest

from md_engine.runtime import telemetry


class FakeLogger:
    def __init__(self) -> None:
        self.records: List[Tuple[str, str, Any]] = []
        self.context: Dict[str, str] = {}
        self.components: List[str] = []
        self.profiled: List[str] = []

    def info_with(self, message: str, pairs: Any) -> None:
        self.records.append(("info", message, pairs))

    def debug_with(self, message: str, pairs: Any) -> None:
        self.records.append(("debug", message, pairs))

    def error_with(self, message: str, pairs: Any) -> None:
        self.records.append(("error", message, pairs))

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        del self.context[key]

    def track_component(self, name: str):
        self.components.append(name)
        return nullcontext()

    def profile(self, name: str):
        self.profiled.append(name)
        return nullcontext()


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    fake = FakeLogger()
    monkeypatch.setattr(telemetry, "_logger", fake)
    return fake


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="loud")


def test_env_flag_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MD_ENGINE_SAMPLE_FLAG", " Yes ")

    assert telemetry.env_flag("SAMPLE_FLAG", False)
    assert telemetry.env_flag("MISSING_FLAG", True)


def test_record_event_sends_key_value_pairs(fake_logger: FakeLogger) -> None:
    telemetry.record_event("render.complete", level="debug", data={"elements": 3})

    assert fake_logger.records == [
        ("debug", "event::render.complete", [("event", "render.complete"), ("elements", "3")])
    ]


def test_span_profiles_and_tracks_component(fake_logger: FakeLogger) -> None:
    with telemetry.span("session::insert_text", component=True, metadata={"session": "a.md"}) as handle:
        assert fake_logger.context == {"session": "a.md"}
        assert handle.component_name == "session::insert_text"

    assert fake_logger.profiled == ["session::insert_text"]
    assert fake_logger.components == ["session::insert_text"]
    assert fake_logger.context == {}


def test_span_reports_failure_and_reraises(fake_logger: FakeLogger) -> None:
    with pytest.raises(KeyError):
        with telemetry.span("markdown::render", metadata={"chars": 4}) as handle:
            handle.add_metadata("step", 1)
            raise KeyError("boom")

    level, message, pairs = fake_logger.records[-1]
    assert (level, message) == ("error", "span::fail")
    assert ("span", "markdown::render") in pairs
    assert ("step", "1") in pairs
    assert ("reason", "'boom'") in pairs
    assert fake_logger.components == []
    assert fake_logger.context == {}
