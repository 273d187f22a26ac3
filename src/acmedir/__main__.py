"""Allow ``python -m acmedir``."""

from acmedir.cli.main import main

main()
