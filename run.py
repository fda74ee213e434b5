#!/usr/bin/env python3
"""
S3Hero

Run this script to use the CLI without installing the package.

Usage:
    python run.py --version                      # Print the version
    python run.py profile list                   # List connection profiles
    python run.py profile test r2                # Check a profile can connect
    python run.py formula render                 # Print the Homebrew formula
    python run.py formula audit Formula/*.rb     # Audit formula files
    python run.py formula smoke                  # Run the --version smoke test
"""

import sys
from s3hero.cli import main

if __name__ == "__main__":
    sys.exit(main())
