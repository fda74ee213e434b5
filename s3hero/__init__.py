"""
S3Hero.

A CLI tool to manage S3 connection profiles across AWS, Cloudflare R2 and
other S3-compatible services, plus the tooling that maintains its own
packaging formula.
"""

__version__ = "1.0.0"

from s3hero.cli import main

__all__ = ["main", "__version__"]
