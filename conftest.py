"""Global pytest configuration."""

import os
from pathlib import Path

# Point NOTES_ROOT at the fixture notes before any settings are loaded
os.environ.setdefault("NOTES_ROOT", str(Path(__file__).parent / "tests" / "fixtures" / "notes"))
