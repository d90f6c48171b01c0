import sys

from paginator.cli import main

sys.exit(main())
