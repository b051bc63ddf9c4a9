"""Allow ``python -m loom``."""

import sys

from .main import main

sys.exit(main())
