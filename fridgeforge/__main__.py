import sys

from fridgeforge.cli import main

sys.exit(main())
