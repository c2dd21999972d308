import sys

from kreolsafe.cli import main

sys.exit(main())
