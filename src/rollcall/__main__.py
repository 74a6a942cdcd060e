"""Entry point for 'python -m rollcall'."""

from rollcall.cli import main

if __name__ == "__main__":
    main()
