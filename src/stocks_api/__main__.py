import sys

from stocks_api.main import run

sys.exit(run())
