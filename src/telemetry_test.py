from typing import Annotated, Any

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from declarest.exceptions import ErrorResponse
from declarest.http import MockHttpTransport, Path, RestClient, base_url, get
from declarest.telemetry import add_service_name
from declarest.telemetry.manager import TelemetryManager


@base_url("http://traced.test")
class TracedClient(RestClient):
    @get("/orders/{id}")
    async def order(self, id: Annotated[int, Path()]) -> Any: ...


@pytest.fixture
def exporter():
    return InMemorySpanExporter()


@pytest.fixture
def client(exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    client = TracedClient(MockHttpTransport())
    client.telemetry = TelemetryManager(provider.get_tracer("test"))
    return client


@pytest.mark.asyncio
async def test_invocation_creates_main_and_child_spans(client, exporter):
    await client.order(9)

    spans = {span.name: span for span in exporter.get_finished_spans()}

    assert set(spans) == {
        "declarest.GET /orders/{id}",
        "declarest.build_request",
        "declarest.dispatch",
    }
    main = spans["declarest.GET /orders/{id}"]
    assert main.status.status_code == StatusCode.OK
    assert main.attributes["declarest.method_name"] == "order"
    assert main.attributes["declarest.class_name"] == "TracedClient"
    assert spans["declarest.build_request"].attributes["url.full"] == "http://traced.test/orders/9"


@pytest.mark.asyncio
async def test_interceptor_gets_its_own_span(client, exporter):
    client.set_request_interceptor(lambda req: req)

    await client.order(1)

    assert "declarest.intercept" in {span.name for span in exporter.get_finished_spans()}


@pytest.mark.asyncio
async def test_failures_mark_spans_as_error(client, exporter):
    client.transport.response({"message": "gone"}, 410, "Gone")

    with pytest.raises(ErrorResponse):
        await client.order(2)

    spans = {span.name: span for span in exporter.get_finished_spans()}
    main = spans["declarest.GET /orders/{id}"]
    assert main.status.status_code == StatusCode.ERROR
    assert main.attributes["http.response.status_code"] == 410
    assert spans["declarest.dispatch"].status.status_code == StatusCode.ERROR


def test_service_name_processor_adds_fields():
    processor = add_service_name("svc", "2.0.0")

    event = processor(None, "info", {"event": "hello"})

    assert event["service_name"] == "svc"
    assert event["service_version"] == "2.0.0"
    assert "trace_id" not in event


def test_setup_from_config_only_configures_logging_when_disabled(monkeypatch):
    from declarest.config import ClientConfig
    from declarest.telemetry import config as telemetry_config

    calls = []
    monkeypatch.setattr(telemetry_config, "configure_structlog", lambda *args: calls.append(("logging", args)))
    monkeypatch.setattr(telemetry_config, "setup_telemetry", lambda *args, **kwargs: calls.append(("telemetry", args)))

    telemetry_config.setup_from_config(ClientConfig(service_name="svc", log_level="DEBUG"))
    assert calls == [("logging", ("svc", "1.0.0", "DEBUG"))]

    calls.clear()
    telemetry_config.setup_from_config(
        ClientConfig(service_name="svc", telemetry={"enabled": True, "service_version": "3.1"})
    )
    assert calls == [("telemetry", ("svc", "3.1"))]
