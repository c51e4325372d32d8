"""File-based storage implementation.

Reads problem documents from a JSON Lines file:

    base_dir/problems.jsonl

Each line is one document: ``{"id": "...", "title": ..., "location": {...}}``
with the same camelCase fields the mobile app's backend stores. The file is
re-read on every query so that an external writer (or the seed tool) can
append to it while the server runs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from cidade_alerta.core.errors import InvalidDocumentError, NotFoundError
from cidade_alerta.core.models import report_from_document
from cidade_alerta.storage.memory_storage import matches_filters

if TYPE_CHECKING:
    from cidade_alerta.core.models import Category, Report, Severity, Status

log = structlog.get_logger()

PROBLEMS_FILE = "problems.jsonl"


def read_jsonl(path: Path) -> list[dict]:
    """Read a JSON Lines file, skipping blank and undecodable lines."""
    if not path.exists():
        return []
    documents = []
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                doc = json.loads(line)
            except json.JSONDecodeError:
                log.warning("jsonl_line_skipped", path=str(path), line=line_no)
                continue
            if isinstance(doc, dict):
                documents.append(doc)
            else:
                log.warning("jsonl_line_skipped", path=str(path), line=line_no)
    return documents


class JsonlReportStore:
    """ReportStore backed by a problems.jsonl file on disk."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._base_dir / PROBLEMS_FILE

    @property
    def path(self) -> Path:
        return self._path

    def read_all(self) -> list[Report]:
        """Parse every document in the file, skipping those that don't convert."""
        reports = []
        for doc in read_jsonl(self._path):
            doc_id = doc.get("id")
            if not doc_id:
                log.warning("document_skipped", reason="missing id")
                continue
            try:
                reports.append(report_from_document(doc_id, doc))
            except InvalidDocumentError as exc:
                log.warning("document_skipped", report_id=doc_id, reason=str(exc))
        return reports

    def query(
        self,
        category: Category | None = None,
        severity: Severity | None = None,
        status: Status | None = None,
    ) -> list[Report]:
        return [r for r in self.read_all() if matches_filters(r, category, severity, status)]

    def get(self, report_id: str) -> Report:
        for report in self.read_all():
            if report.id == report_id:
                return report
        raise NotFoundError(f"report {report_id} not found")
