from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from declarest.http.binding import CompiledBinding
from declarest.http.request_options import RequestDescriptor


class TelemetryManager:
    """Manager centralizado para telemetría OpenTelemetry"""

    def __init__(self, tracer: trace.Tracer):
        self.tracer = tracer

    def create_main_span(self, method: str, path_template: str):
        """Crea el span principal de la invocación"""
        return self.tracer.start_as_current_span(
            name=f"declarest.{method} {path_template}",
            kind=trace.SpanKind.CLIENT,
            record_exception=False,
            set_status_on_exception=False,
        )

    def create_child_span(self, name: str):
        """Crea un span hijo del span actual en contexto"""
        return self.tracer.start_as_current_span(
            name=f"declarest.{name}",
            record_exception=False,
            set_status_on_exception=False,
        )

    @contextmanager
    def step(self, name: str):
        """Span hijo que se cierra en OK o en ERROR (registrando la excepción)"""
        with self.create_child_span(name) as span:
            try:
                yield span
            except Exception as e:
                self.finish_span_error(span, e, True)
                raise
            self.finish_span_ok(span)

    def set_main_span_attributes(
        self,
        span,
        binding: CompiledBinding,
        class_name: str,
        has_interceptor: bool,
    ):
        """Establece atributos del span principal"""
        span.set_attribute("http.request.method", binding.method)
        span.set_attribute("url.template", binding.path)
        span.set_attribute("declarest.method_name", binding.name)
        span.set_attribute("declarest.class_name", class_name)
        span.set_attribute("declarest.has_interceptor", has_interceptor)

    def set_build_attributes(self, span, binding: CompiledBinding, options: RequestDescriptor):
        """Establece atributos de construcción del request"""
        span.set_attribute("url.full", options.get_url())
        span.set_attribute("declarest.build.path_params_count", len(binding.path_params))
        span.set_attribute("declarest.build.query_params_count", options.params.length)
        span.set_attribute("declarest.build.header_params_count", len(binding.header_params))
        span.set_attribute("declarest.build.has_body", binding.body_param is not None)
        span.set_attribute("declarest.build.content_type", options.get_content_type())

    def set_error_attributes(self, span, error: Exception):
        """Atributos de error; el status HTTP solo si el error lo trae"""
        span.set_attribute("error.type", type(error).__name__)
        status = getattr(error, "status", None)
        if isinstance(status, int):
            span.set_attribute("http.response.status_code", status)

    def finish_span_ok(self, span):
        """Finaliza un span con status OK"""
        if span and span.is_recording():
            span.set_status(Status(StatusCode.OK))

    def finish_span_error(self, span, error: Exception, record_exception: bool = True):
        """Finaliza un span con status ERROR.

        Args:
            span: El span a finalizar
            error: La excepción que causó el error
            record_exception: Si es True, registra los detalles de la excepción.
                            Si es False, solo marca el status como ERROR.
        """
        if span and span.is_recording():
            if record_exception:
                span.set_status(Status(StatusCode.ERROR, str(error)))
                span.record_exception(error)
            else:
                span.set_status(Status(StatusCode.ERROR))
