#!/usr/bin/env python
"""Development server: hot reload, DEBUG console logging."""

import logging

from pokemath import main

if __name__ in {"__main__", "__mp_main__"}:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s: %(message)s",
    )
    # The reloader and the SDK's HTTP stack log every poll and request
    for name in ("watchfiles", "aiohttp", "urllib3", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)
    main()
