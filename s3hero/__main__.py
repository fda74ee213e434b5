import sys

from s3hero.cli import main

sys.exit(main())
