"""Allow ``python -m oceanrace``."""

import sys

from .cli import main

sys.exit(main())
