from __future__ import annotations
import os
import logging


def setup_logging():
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    endpoint = os.getenv("OTEL_EXPORTER_ENDPOINT")
    if endpoint:
        try:
            from opentelemetry import trace
            from opentelemetry.sdk.resources import Resource
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
            from opentelemetry.sdk.trace.export import BatchSpanProcessor
            provider = TracerProvider(resource=Resource.create({"service.name": "csvchat"}))
            provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
            trace.set_tracer_provider(provider)
            logging.getLogger("app").info("OpenTelemetry OTLP exporter configured.")
        except Exception:
            logging.getLogger("app").warning("Failed to configure OpenTelemetry exporter.", exc_info=True)
