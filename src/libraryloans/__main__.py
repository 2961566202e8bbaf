"""Main entry point for the libraryloans package."""

from libraryloans.cli import main


if __name__ == "__main__":
    main()
