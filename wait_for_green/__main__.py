"""Allow ``python -m wait_for_green``."""

from wait_for_green.cli.main import main


main()
