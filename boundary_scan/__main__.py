import sys

from boundary_scan.presentation.cli.scan_cli import main

sys.exit(main())
