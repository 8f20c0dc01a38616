import sys

from taxparcels.cli import main

sys.exit(main())
