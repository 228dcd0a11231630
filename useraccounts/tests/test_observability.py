from __future__ import annotations

from collections.abc import Iterator

import pytest
from prometheus_client import REGISTRY

from useraccounts.app import create_app
from useraccounts.application.services.session_tokens import SessionIssuer
from useraccounts.infrastructure.observability import configure_metrics, metrics_enabled
from useraccounts.shared.config import AppConfig
from useraccounts.shared.config.settings import ObservabilityConfig
from useraccounts.tests.fakes import make_user


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.fixture(autouse=True)
def _metrics_on() -> Iterator[None]:
    yield
    configure_metrics(True)


def test_session_events_follow_metrics_switch(issuer: SessionIssuer) -> None:
    projection = make_user().projection()
    before = _sample("useraccounts_session_events_total", event="issued")

    configure_metrics(False)
    issuer.issue(projection)
    assert _sample("useraccounts_session_events_total", event="issued") == before

    configure_metrics(True)
    issuer.issue(projection)
    assert _sample("useraccounts_session_events_total", event="issued") == before + 1


def test_create_app_applies_metrics_setting(app_config: AppConfig) -> None:
    config = app_config.model_copy(
        update={"observability": ObservabilityConfig(metrics_enabled=False)}
    )
    app = create_app(config)
    try:
        assert metrics_enabled() is False
        before = _sample("useraccounts_requests_total", endpoint="/api/status", status="200")

        assert app.test_client().get("/api/status").status_code == 200

        after = _sample("useraccounts_requests_total", endpoint="/api/status", status="200")
        assert after == before
    finally:
        app.extensions["container"].close()
