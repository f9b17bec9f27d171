"""Allow ``python -m filecrypt``."""

import sys

from filecrypt.cli import main

sys.exit(main())
