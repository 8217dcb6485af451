"""Main entry point when executing aftership as a package.

This allows running the package using python -m aftership.
"""

from aftership.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
