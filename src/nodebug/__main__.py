"""Allow ``python -m nodebug``."""

from nodebug.cli import cli_main

if __name__ == "__main__":
    cli_main()
