"""Snapshots — committed canonical layouts and drift checks against them.

A snapshot is the canonical JSON dump of a layout checked into version
control. Drift means the freshly canonicalized layout no longer serializes
to the committed bytes, i.e. storage actually changed.
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass, field
from pathlib import Path

from solcanon.layout.io import dump_layout
from solcanon.layout.models import StorageLayout

logger = logging.getLogger(__name__)


@dataclass
class SnapshotReport:
    """Result of comparing a layout against its snapshot file."""

    path: str
    exists: bool = True
    details: list[str] = field(default_factory=list)  # Unified diff lines

    @property
    def has_drift(self) -> bool:
        return not self.exists or len(self.details) > 0

    def summary(self) -> str:
        if not self.exists:
            return f"{self.path}: snapshot missing"
        if not self.has_drift:
            return f"{self.path}: up to date"
        changed = sum(
            1
            for line in self.details
            if line[:1] in ("+", "-") and not line.startswith(("+++", "---"))
        )
        return f"{self.path}: DRIFT ({changed} changed line(s))"


def write_snapshot(layout: StorageLayout, path: str | Path) -> Path:
    """Write the canonical dump of ``layout`` to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_layout(layout))
    logger.info("Wrote snapshot %s", path)
    return path


def check_snapshot(layout: StorageLayout, path: str | Path) -> SnapshotReport:
    """Compare the canonical dump of ``layout`` with the file at ``path``."""
    path = Path(path)
    report = SnapshotReport(path=str(path))

    if not path.exists():
        report.exists = False
        return report

    expected = path.read_text()
    actual = dump_layout(layout)
    if expected != actual:
        report.details = list(
            difflib.unified_diff(
                expected.splitlines(),
                actual.splitlines(),
                fromfile=f"{path} (snapshot)",
                tofile=f"{path} (current)",
                lineterm="",
            )
        )
        if not report.details:
            report.details = ["(line endings or trailing newline differ)"]
        logger.debug("Snapshot %s drifted", path)

    return report
