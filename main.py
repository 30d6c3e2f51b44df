"""Interactive launcher for the power grid puzzle."""

from __future__ import annotations

import sys

from power_grid.ui.main import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
