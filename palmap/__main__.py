import sys

from palmap.cli import main

sys.exit(main())
