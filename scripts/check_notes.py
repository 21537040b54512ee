"""Check workshop notes from a source checkout."""

import sys

from labnotes.cli import main

if __name__ == "__main__":
    sys.exit(main())
