"""Report renderers, selected by output format."""

from typing import Protocol, TextIO

from ..providers.base import ReportBundle
from ..reports.parameters import OutputFormat, ReportParameters
from .console import ConsoleRenderer
from .json_output import JsonRenderer


class ReportRenderer(Protocol):
    def render_report(self, params: ReportParameters, report: ReportBundle) -> None: ...


RENDERERS = {
    OutputFormat.CONSOLE: ConsoleRenderer,
    OutputFormat.JSON: JsonRenderer,
}


def get_renderer(output_format: OutputFormat, stream: TextIO | None = None) -> ReportRenderer:
    """Create the renderer registered for an output format."""
    try:
        renderer_class = RENDERERS[output_format]
    except KeyError:
        available = ", ".join(fmt.value for fmt in RENDERERS)
        raise ValueError(f"Unknown output format '{output_format}'. Available: {available}")
    return renderer_class(stream=stream)


def render_report(params: ReportParameters, report: ReportBundle, stream: TextIO | None = None):
    """Render a report with the renderer selected by ``params.output``."""
    get_renderer(params.output, stream).render_report(params, report)
