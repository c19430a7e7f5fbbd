"""Allow running as ``python -m audis``."""

from audis.cli import main

main()
