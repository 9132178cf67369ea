import sys

from tally_ingestion.cli import main

sys.exit(main())
