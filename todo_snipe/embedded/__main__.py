"""python -m todo_snipe.embedded"""

import sys

from .cli import main

sys.exit(main())
