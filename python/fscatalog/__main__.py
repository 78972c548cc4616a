import sys

from fscatalog.cli import main

sys.exit(main())
