"""CLI entry point - run the lux command from a source checkout

Equivalent to the installed ``lux`` script.
"""

import sys

from cli.main import main

if __name__ == "__main__":
    sys.exit(main())
