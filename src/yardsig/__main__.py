"""Allow running as ``python -m yardsig``."""

import sys

from yardsig.cli import main

sys.exit(main())
