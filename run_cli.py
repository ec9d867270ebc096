#!/usr/bin/env python3
"""
Entry point script to run the LMSync CLI.
"""

import sys
from lmsync.main import main

if __name__ == '__main__':
    sys.exit(main())
