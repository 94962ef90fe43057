"""Allow ``python -m catalogsync``."""

import sys

from catalogsync.ui.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
