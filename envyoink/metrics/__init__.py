"""Prometheus metrics for scan runs."""
from .scan_metrics import ScanMetrics

__all__ = ["ScanMetrics"]
