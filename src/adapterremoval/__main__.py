import sys

from adapterremoval.cli import main_cli

sys.exit(main_cli())
