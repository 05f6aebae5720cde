"""Entry point for ``python -m local_dedup`` and the console script."""

from .cli.app import app
from .common.constants import APP_NAME


def main() -> None:
    app(prog_name=APP_NAME)


if __name__ == "__main__":
    main()
