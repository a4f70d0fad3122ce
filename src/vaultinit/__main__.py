import sys

from vaultinit.cli import main

sys.exit(main())
