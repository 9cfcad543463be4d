from __future__ import annotations

import sys

from lrucache.cli import main

raise SystemExit(main(sys.argv[1:]))
