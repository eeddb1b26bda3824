"""Entry point for running as a module: python -m rest_harness."""

import sys

from rest_harness.cli import main

if __name__ == "__main__":
    sys.exit(main())
