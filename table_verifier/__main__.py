"""Allow running as `python -m table_verifier`."""

import sys

from .cli import main

sys.exit(main())
