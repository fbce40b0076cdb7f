"""Module entrypoint for ``python -m followview``.

All argument parsing and runtime setup happen in ``followview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
