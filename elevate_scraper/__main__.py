import sys

from elevate_scraper.cli import main

sys.exit(main())
