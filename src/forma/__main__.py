"""
Main entry point for the Forma client.
"""

import sys
from forma.cli import main

if __name__ == "__main__":
    sys.exit(main())
