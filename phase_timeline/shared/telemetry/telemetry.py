"""OpenTelemetry distributed tracing configuration"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import \
    OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (BatchSpanProcessor,
                                            ConsoleSpanExporter)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

logger = logging.getLogger(__name__)


class TelemetryConfig:
    """
    OpenTelemetry configuration for distributed tracing

    Features:
    - Automatic instrumentation of FastAPI
    - Support for OTLP and console exporters
    - Trace context in log records

    Timed phases (see `tracing.timed_phase`) show up as child spans of the
    request span, next to the Server-Timing entries they also produce.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        enabled: bool = True,
        environment: str = "development",
    ):
        self.service_name = service_name
        self.service_version = service_version
        self.enabled = enabled
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None

    def setup_telemetry(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """
        Initialize OpenTelemetry tracing

        Args:
            exporter_type: Type of exporter ("console", "otlp", "none")
            otlp_endpoint: OTLP gRPC endpoint (e.g., "http://localhost:4317")
            sample_rate: Sampling rate (0.0-1.0, default 1.0 = 100%)

        Returns:
            TracerProvider instance or None if disabled
        """
        if not self.enabled:
            logger.info("Telemetry disabled")
            return None

        try:
            resource = Resource(
                attributes={
                    SERVICE_NAME: self.service_name,
                    SERVICE_VERSION: self.service_version,
                    "deployment.environment": self.environment,
                }
            )

            self.tracer_provider = TracerProvider(
                resource=resource, sampler=TraceIdRatioBased(sample_rate)
            )

            if exporter_type == "console":
                exporter = ConsoleSpanExporter()
                logger.info("Using Console span exporter (development mode)")

            elif exporter_type == "otlp" and otlp_endpoint:
                # Use TLS for https:// endpoints
                use_insecure = otlp_endpoint.startswith("http://")
                exporter = OTLPSpanExporter(endpoint=otlp_endpoint, insecure=use_insecure)
                logger.info(f"Using OTLP span exporter: {otlp_endpoint}")

            elif exporter_type == "none":
                logger.info("Telemetry enabled but no exporter configured")
                trace.set_tracer_provider(self.tracer_provider)
                return self.tracer_provider

            else:
                logger.warning("Unknown exporter type '%s', using console", exporter_type)
                exporter = ConsoleSpanExporter()

            self.tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(self.tracer_provider)

            logger.info(
                "OpenTelemetry initialized: service=%s, version=%s, exporter=%s",
                self.service_name,
                self.service_version,
                exporter_type,
            )

            return self.tracer_provider

        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None

    def instrument_fastapi(self, app: FastAPI):
        """
        Instrument FastAPI application with OpenTelemetry

        Automatically traces:
        - HTTP requests/responses
        - Request duration
        - Status codes
        - Exceptions
        """
        if not self.enabled or not self.tracer_provider:
            return

        try:
            FastAPIInstrumentor.instrument_app(
                app,
                tracer_provider=self.tracer_provider,
                excluded_urls="/health",  # Don't trace health checks
            )
            logger.info("FastAPI instrumentation enabled")
        except Exception as e:
            logger.error("Failed to instrument FastAPI: %s", e)

    def instrument_logging(self):
        """
        Instrument Python logging with OpenTelemetry

        Adds trace context to log records:
        - trace_id
        - span_id
        - service.name
        """
        if not self.enabled or not self.tracer_provider:
            return

        try:
            LoggingInstrumentor().instrument(
                tracer_provider=self.tracer_provider, set_logging_format=True
            )
            logger.info("Logging instrumentation enabled")
        except Exception as e:
            logger.error("Failed to instrument logging: %s", e)

    def shutdown(self):
        """Shutdown tracer provider and flush remaining spans"""
        if self.tracer_provider:
            try:
                self.tracer_provider.shutdown()
                logger.info("Telemetry shutdown complete")
            except Exception as e:
                logger.error("Error during telemetry shutdown: %s", e)


# Global telemetry instance
_telemetry: TelemetryConfig | None = None


def get_telemetry() -> TelemetryConfig | None:
    """Get global telemetry instance"""
    return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None):
    """Set global telemetry instance"""
    global _telemetry
    _telemetry = telemetry
