#!/usr/bin/env python3
"""
Export JSON Schema files from the Pydantic models.
- Draft: 2020-12
- Sources: mapscrawl/schemas.py (BusinessRecord, SearchQuery), mapscrawl/config.py (CrawlerSettings)
- Outputs: schemas/*.schema.json
"""
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

ROOT = Path(__file__).resolve().parents[1]
SCHEMAS_DIR = ROOT / "schemas"

sys.path.insert(0, str(ROOT))

from mapscrawl.config import CrawlerSettings  # noqa: E402
from mapscrawl.schemas import BusinessRecord, SearchQuery  # noqa: E402

SCHEMA_VERSION = "https://json-schema.org/draft/2020-12/schema"


def add_common_headers(schema: Dict[str, Any], title: str, description: str, example: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    schema.setdefault("$schema", SCHEMA_VERSION)
    schema.setdefault("title", title)
    schema.setdefault("description", description)
    if example is not None:
        schema.setdefault("examples", [example])
    return schema


def record_example() -> dict:
    return {
        "name": "Zahnarztpraxis Dr. Beispiel",
        "address": "Hauptstraße 5, 44388 Dortmund",
        "phone": "0231 1234567",
    }


def save_schema(model, path: Path, title: str, description: str, example: Optional[dict] = None):
    schema = model.model_json_schema()
    schema = add_common_headers(schema, title, description, example)
    path.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    print(f"Wrote {path.relative_to(ROOT)}")


def main():
    SCHEMAS_DIR.mkdir(parents=True, exist_ok=True)
    save_schema(
        BusinessRecord,
        SCHEMAS_DIR / "business_record.schema.json",
        "BusinessRecord",
        "One unique business as written to the results JSON array.",
        record_example(),
    )
    save_schema(
        SearchQuery,
        SCHEMAS_DIR / "search_query.schema.json",
        "SearchQuery",
        "Category and five digit postal code of one search.",
        {"category": "zahnarzt", "postal_code": "44388"},
    )
    save_schema(
        CrawlerSettings,
        SCHEMAS_DIR / "crawler_settings.schema.json",
        "CrawlerSettings",
        "YAML configuration accepted by mbc.run --config.",
    )


if __name__ == "__main__":
    main()
