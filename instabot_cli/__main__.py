"""
Module execution entry point.

Allows running with: python -m instabot_cli
"""

import sys
from instabot_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
