"""
Package entry point.

Allows running the application via:

    python -m notefinder

This simply forwards execution to notefinder.cli.main().
"""

from notefinder.cli import main

if __name__ == "__main__":
    main()
