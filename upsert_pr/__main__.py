import sys

from upsert_pr.main import main

sys.exit(main())
