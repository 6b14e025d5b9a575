#!/usr/bin/env python
"""Production server: no reload, real Stytch Auth Service required."""

import os
import sys

os.environ["POKEMATH_RELOAD"] = "0"

from pokemath import main
from pokemath.config import get_settings

if __name__ in {"__main__", "__mp_main__"}:
    if get_settings().dev.auth_mock:
        sys.exit("run_prod.py refuses to start with DEV__AUTH_MOCK=true")
    main()
