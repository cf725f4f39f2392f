"""Entry point for ``python -m swiftstore``."""

import sys

from swiftstore.cli import main

sys.exit(main())
