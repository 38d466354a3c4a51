"""Entry point for running the package as a module.

Usage:
    python -m faceid register "Ada"
    python -m faceid scan
"""

from .cli import main


if __name__ == "__main__":
    main()
