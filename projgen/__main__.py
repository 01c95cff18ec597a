"""Entry point for ``python -m projgen``."""

from .cli import main

main()
