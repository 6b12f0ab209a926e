"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import CDX_ENDPOINT, LookupSettings, SelectionMode

__all__ = [
    "CDX_ENDPOINT",
    "ConfigLocator",
    "ConfigRepository",
    "LookupSettings",
    "SelectionMode",
]
