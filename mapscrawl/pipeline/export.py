"""
Export Pipeline - JSON/CSV output of the unique business list

Writes the flat ``{name, address, phone}`` records of one search. The
JSON file is written even for an empty result set so downstream tooling
always finds an array.
"""

import csv
import json
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..schemas import BusinessCandidate, BusinessRecord


CSV_FIELDS = ["name", "address", "phone"]

Exportable = Union[BusinessRecord, BusinessCandidate]


def to_records(items: Sequence[Exportable]) -> List[BusinessRecord]:
    records = []
    for item in items:
        if isinstance(item, BusinessCandidate):
            records.append(BusinessRecord.from_candidate(item))
        else:
            records.append(item)
    return records


def format_record(record: BusinessRecord, index: int, missing: str = "N/A") -> str:
    """Three-line terminal rendering with ``missing`` for unresolved fields."""
    return (
        f"\n{index}. {record.name}\n"
        f"   Address: {record.address or missing}\n"
        f"   Phone: {record.phone or missing}"
    )


class ResultExporter:
    """Writes search results to ``output_dir``."""

    def __init__(self, output_dir: Union[str, Path] = "output", indent: int = 2):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.indent = indent

    def to_json(self, items: Sequence[Exportable], filename: str = "google_maps_results.json") -> Path:
        """
        Export records as a JSON array.

        Args:
            items: BusinessRecord or BusinessCandidate objects, in output order
            filename: Output filename inside output_dir

        Returns:
            Path to created JSON file
        """
        records = to_records(items)
        json_path = self.output_dir / filename
        data = [r.model_dump() for r in records]
        with open(json_path, 'w', encoding='utf-8') as jsonfile:
            json.dump(data, jsonfile, indent=self.indent, ensure_ascii=False)
        print(f"💾 JSON exported: {json_path} ({len(data)} businesses)")
        return json_path

    def to_csv(self, items: Sequence[Exportable], filename: Optional[str] = None) -> Path:
        """Export records as CSV; defaults to google_maps_results.csv."""
        records = to_records(items)
        csv_path = self.output_dir / (filename or "google_maps_results.csv")
        with open(csv_path, 'w', newline='', encoding='utf-8') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for r in records:
                row = r.model_dump()
                writer.writerow({k: (row.get(k) or "") for k in CSV_FIELDS})
        print(f"💾 CSV exported: {csv_path} ({len(records)} businesses)")
        return csv_path
