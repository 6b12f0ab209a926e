"""Exporter SPI and implementations."""

from .base import BaseExporter
from .file_exporter import TextFileExporter

__all__ = ["BaseExporter", "TextFileExporter"]
