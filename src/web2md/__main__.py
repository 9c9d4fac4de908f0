"""Run the web2md command line with ``python -m web2md page.html``."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

from web2md.cli import main

sys.exit(main())
