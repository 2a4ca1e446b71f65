import sys

from scriptgate.cli import main

sys.exit(main())
