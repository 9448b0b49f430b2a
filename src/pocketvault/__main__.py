import sys
from pocketvault.cli import main

sys.exit(main())
