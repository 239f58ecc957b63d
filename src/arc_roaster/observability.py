from contextlib import contextmanager
import logging
import time
from urllib.parse import urlparse

from .errors import describe_error
from .schemas import TraceStep
from .settings import Settings

logger = logging.getLogger(__name__)


def configure_tracer(settings: Settings):
    if not settings.dd_trace_enabled:
        return None
    try:
        from ddtrace import tracer
    except ImportError:  # pragma: no cover
        logger.warning('DD_TRACE_ENABLED is set but ddtrace is not installed')
        return None
    if settings.dd_trace_agent_url:
        parsed = urlparse(settings.dd_trace_agent_url)
        if parsed.scheme in {'http', 'https'} and parsed.hostname:
            tracer.configure(
                hostname=parsed.hostname,
                port=parsed.port or 8126,
                https=(parsed.scheme == 'https'),
            )
        elif parsed.scheme == 'unix' and parsed.path:
            tracer.configure(uds_path=parsed.path)
    return tracer


class TraceCollector:
    """Timeline of one roast: one entry per step, plus the best-effort sources that fell back."""

    def __init__(self, settings: Settings, tracer=None) -> None:
        self.settings = settings
        self.tracer = tracer
        self.steps: list[TraceStep] = []
        self._span = None
        self._fallbacks: list[str] = []

    def _open_span(self, name: str, detail: str | None):
        if self.tracer is None:
            return None
        span = self.tracer.trace(f'roast.{name}', service=self.settings.dd_service, resource=name)
        span.set_tag('env', self.settings.dd_env)
        span.set_tag('version', self.settings.dd_version)
        if detail:
            span.set_tag('detail', detail)
        return span

    def fallback(self, source: str, error: Exception) -> None:
        self._fallbacks.append(source)
        if self._span is not None:
            self._span.set_tag(f'fallback.{source}', describe_error(error))

    def _close(self, name: str, started: float, error: Exception | None, detail: str | None) -> None:
        if self._span is not None:
            if error is not None:
                self._span.set_tag('error', 1)
                self._span.set_tag('error.msg', describe_error(error))
            self._span.finish()
        self.steps.append(
            TraceStep(
                step=name,
                duration_ms=int((time.perf_counter() - started) * 1000),
                ok=error is None,
                detail=detail if error is None else describe_error(error),
                fallbacks=self._fallbacks,
            )
        )
        self._span = None
        self._fallbacks = []

    @contextmanager
    def step(self, name: str, detail: str | None = None):
        started = time.perf_counter()
        self._span = self._open_span(name, detail)
        try:
            yield self
        except Exception as exc:
            self._close(name, started, exc, detail)
            raise
        self._close(name, started, None, detail)

    def as_list(self) -> list[TraceStep]:
        return self.steps
