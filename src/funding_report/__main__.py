"""Allow ``python -m funding_report``."""

import sys

from funding_report.main import main

sys.exit(main())
