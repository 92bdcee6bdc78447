#!/usr/bin/env python3
"""
main.py - Entry point for running rootmount from a source checkout.
"""
import sys
from pathlib import Path

if __name__ == "__main__":
    script_dir = Path(__file__).resolve().parent
    if str(script_dir) not in sys.path:
        sys.path.insert(0, str(script_dir))

    from rootmount.cli import main
    sys.exit(main())
