"""Allow ``python -m gifpace``."""

from gifpace.main import run


run()
