"""Per-run scan counters.

Each ScanMetrics owns a private CollectorRegistry so repeated runs in one
process (tests, library use) never collide on the global default registry.
The CLI exports it with ``--metrics-file`` in the node_exporter textfile
format.

Exposed series:
  envyoink_files_scanned_total
  envyoink_names_extracted_total
  envyoink_extract_errors_total{kind}
  envyoink_unique_names
"""
from __future__ import annotations

import logging
import os

from prometheus_client import CollectorRegistry, Counter, Gauge, write_to_textfile

from ..utils.exceptions import OutputError

logger = logging.getLogger(__name__)


class ScanMetrics:
    def __init__(self) -> None:
        self.registry = CollectorRegistry()
        self.files_scanned = Counter(
            "envyoink_files_scanned",
            "Regular files visited by the enumerator",
            registry=self.registry,
        )
        self.names_extracted = Counter(
            "envyoink_names_extracted",
            "Names extracted before de-duplication",
            registry=self.registry,
        )
        self.extract_errors = Counter(
            "envyoink_extract_errors",
            "Per-file extraction failures by kind",
            ["kind"],
            registry=self.registry,
        )
        self.unique_names = Gauge(
            "envyoink_unique_names",
            "Unique names in the rendered env example",
            registry=self.registry,
        )

    def value(self, name: str, labels: dict[str, str] | None = None) -> float:
        v = self.registry.get_sample_value(name, labels or {})
        return 0.0 if v is None else v

    def write_textfile(self, path: str | os.PathLike[str]) -> None:
        target = os.fspath(path)
        try:
            parent = os.path.dirname(target)
            if parent:
                os.makedirs(parent, exist_ok=True)
            write_to_textfile(target, self.registry)
        except OSError as e:
            raise OutputError(f"Failed to write metrics to {target}: {e}") from e
        logger.debug("Metrics written to %s", path)


__all__ = ["ScanMetrics"]
