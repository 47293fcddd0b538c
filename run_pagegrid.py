#!/usr/bin/env python3
"""
PageGrid launcher script.

Run this from the project root to start the demo grid window.
"""

import sys

if __name__ == '__main__':
    from pagegrid.run_gui import main
    sys.exit(main())
