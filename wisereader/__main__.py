"""Module entrypoint for ``python -m wisereader``.

All argument parsing and runtime setup happen in ``wisereader.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
