"""Main entry point when executing swrcache as a package.

This allows running the package using python -m swrcache.
"""

from swrcache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
