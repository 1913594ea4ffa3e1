"""Module entrypoint for ``python -m blinksearch``.

Pipeline stages and fzf key bindings re-invoke the program this way.
All argument parsing and runtime setup happen in ``blinksearch.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
