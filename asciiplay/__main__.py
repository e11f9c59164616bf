"""Allow ``python -m asciiplay``."""

import sys

from .cli import main

sys.exit(main())
