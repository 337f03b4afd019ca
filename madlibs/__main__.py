"""Entry point for ``python -m madlibs``."""
from madlibs.game import cli


if __name__ == "__main__":
    cli()
