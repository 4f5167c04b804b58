"""Extraction engine: file enumeration, per-file extraction and aggregation."""
from .aggregator import ResultSet, aggregate, render, write_output
from .enumerator import enumerate_files
from .extractor import extract
from .models import FileEntry, ScanError, ScanReport
from .pipeline import run_scan

__all__ = [
    "FileEntry",
    "ScanError",
    "ScanReport",
    "ResultSet",
    "aggregate",
    "enumerate_files",
    "extract",
    "render",
    "run_scan",
    "write_output",
]
