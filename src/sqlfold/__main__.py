"""Allow ``python -m sqlfold``."""

import sys

from sqlfold.cli import main

sys.exit(main())
