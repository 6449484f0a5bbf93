"""Entry point for `python -m gamedesk`.

Usage:
    python -m gamedesk
"""

from __future__ import annotations

import asyncio

from gamedesk.app import main

asyncio.run(main())
