"""Module entrypoint for ``python -m mailpick``.

Argument parsing, logging and browser setup happen in ``mailpick.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
