"""Batch loading of extraction records and formatting of resolution results."""

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from card_identity.models.card import RawExtraction, ResolutionResult

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Records loaded from a set of extraction files."""

    records: list[RawExtraction] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    @property
    def loaded(self) -> int:
        """Number of records loaded."""
        return len(self.records)

    @property
    def failed(self) -> int:
        """Number of files that could not be loaded."""
        return len(self.errors)


class BatchLoader:
    """Load OCR/LLM extraction files with per-file error isolation."""

    # Extraction files written by the OCR/LLM collaborator
    RECORD_EXTENSIONS = {".json"}

    def load(self, paths: list[Path]) -> LoadResult:
        """
        Load extraction records from JSON files, isolating errors per file.

        A file holds either one record object or a list of them. Records
        without a filename are named after their file, suffixed with
        ``#<index>`` when the file holds a list.

        Args:
            paths: Files to read.

        Returns:
            LoadResult with the records in file order and any errors.
        """
        result = LoadResult()

        for path in paths:
            try:
                result.records.extend(self._load_file(path))
            except (OSError, ValueError) as e:
                logger.warning("Skipping %s: %s", path, e)
                result.errors.append({
                    "path": str(path),
                    "error": str(e),
                })

        return result

    def _load_file(self, path: Path) -> list[RawExtraction]:
        data = json.loads(path.read_text(encoding="utf-8"))

        if isinstance(data, dict):
            items, indexed = [data], False
        elif isinstance(data, list):
            items, indexed = data, True
        else:
            raise ValueError("Expected a record object or a list of records")

        records = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValueError(f"Record {index} is not an object")
            record = RawExtraction.model_validate(item)
            if not record.filename:
                name = f"{path.name}#{index}" if indexed else path.name
                record = record.model_copy(update={"filename": name})
            records.append(record)
        return records

    def collect_files(self, inputs: list[Path]) -> list[Path]:
        """
        Expand input paths into the extraction files to load.

        Files are kept in the order given; a directory contributes its own
        ``.json`` files (not recursively) sorted by name. A file reached
        twice is only loaded once. Input order decides which records come
        first, and so which record seeds each merged entity.
        """
        seen: set[Path] = set()
        files: list[Path] = []

        for path in inputs:
            if path.is_dir():
                candidates = sorted(p for p in path.iterdir() if p.is_file())
            else:
                candidates = [path] if path.is_file() else []
            for candidate in candidates:
                key = candidate.resolve()
                if candidate.suffix.lower() not in self.RECORD_EXTENSIONS or key in seen:
                    continue
                seen.add(key)
                files.append(candidate)

        return files

    def to_json(self, result: ResolutionResult, load: LoadResult | None = None) -> str:
        """
        Format a resolution result as JSON.

        Args:
            result: ResolutionResult to format.
            load: Load result whose errors are reported alongside.

        Returns:
            JSON string with metadata, entities, and errors.
        """
        output = {
            "metadata": result.metadata.model_dump(by_alias=True),
            "entities": [e.model_dump(by_alias=True) for e in result.entities],
            "errors": load.errors if load else [],
        }
        return json.dumps(output, indent=2, ensure_ascii=False)

    def to_csv(self, result: ResolutionResult) -> str:
        """
        Format resolved entities as a flat CSV summary.

        Repeatable fields are joined with ``"; "``.

        Args:
            result: ResolutionResult to format.

        Returns:
            CSV string with one row per entity.
        """
        output = io.StringIO()
        fieldnames = [
            "filenames",
            "fullName",
            "jobTitle",
            "company",
            "emails",
            "phones",
            "websites",
            "address",
            "confidence",
        ]
        writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
        writer.writeheader()

        for entity in result.entities:
            row = entity.model_dump(by_alias=True)
            for key in ("filenames", "emails", "phones", "websites"):
                row[key] = "; ".join(row[key])
            writer.writerow(row)

        return output.getvalue()
