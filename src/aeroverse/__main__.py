import sys

from aeroverse.app import main

sys.exit(main())
