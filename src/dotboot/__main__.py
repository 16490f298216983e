"""Allow ``python -m dotboot``."""

import sys

from dotboot.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
