"""Report parameters and assembly."""

from .parameters import OutputFormat, ReportParameters, Timeframe
