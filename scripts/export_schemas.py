"""Export JSON schemas for NoteDocument, NoteIndex and CheckReport."""

import json
from pathlib import Path

from labnotes.models import CheckReport, NoteDocument, NoteIndex


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in (NoteDocument, NoteIndex, CheckReport):
        schema_path = schemas_dir / f"{model.__name__}.schema.json"
        with open(schema_path, "w") as f:
            json.dump(model.model_json_schema(), f, indent=2)
        print(f"Exported {model.__name__} schema to {schema_path}")


if __name__ == "__main__":
    main()
