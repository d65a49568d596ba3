import sys

from orca_mcp.cli import main

sys.exit(main())
