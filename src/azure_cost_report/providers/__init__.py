"""Azure Cost Management query construction and transport."""

from .base import (
    ConfigurationError,
    CostItem,
    CostNamedItem,
    CostReportError,
    CredentialError,
    NormalizationError,
    ParameterError,
    ReportBundle,
    TransportError,
)
