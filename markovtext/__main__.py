"""Allow ``python -m markovtext``."""

import sys

from .cli import main

sys.exit(main())
