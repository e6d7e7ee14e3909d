"""Module entrypoint for ``python -m pointsearch``.

All argument parsing happens in ``pointsearch.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
