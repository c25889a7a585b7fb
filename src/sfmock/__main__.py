# src/sfmock/__main__.py
from __future__ import annotations

from .cli import cli


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
