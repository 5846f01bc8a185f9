"""Allow ``python -m express_ddd_gen``."""

import sys

from express_ddd_gen.cli import main

if __name__ == "__main__":
    sys.exit(main())
