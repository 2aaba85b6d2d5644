"""Session-wide test setup, loaded before any `zkmerkle` import."""

import os

from hypothesis import settings

# Small preset unless the caller picked one.
os.environ.setdefault("ZKMERKLE_ENV", "test")

# Pure-Python Poseidon2 makes single examples slow.
settings.register_profile("zkmerkle", deadline=None)
settings.load_profile("zkmerkle")
