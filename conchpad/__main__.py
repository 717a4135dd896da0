"""Module entrypoint for ``python -m conchpad``."""

from .cli import main


if __name__ == "__main__":
    main()
