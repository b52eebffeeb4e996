"""Allow running the map generator with ``python -m ficture``."""

import sys

from .cli import main

sys.exit(main())
