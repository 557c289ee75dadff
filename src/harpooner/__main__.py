"""Allow ``python -m harpooner``."""

import sys

from .cli import main

sys.exit(main())
