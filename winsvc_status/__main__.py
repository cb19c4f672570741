"""CLI entry point for python -m winsvc_status."""

from .cli import main

if __name__ == "__main__":
    main()
