#!/usr/bin/env python3
"""Main entry point for the FaceID login demo.

Simplified entry point that delegates to the CLI module.

Usage:
    python main.py register "Ada"   # Register a member
    python main.py list             # List members
    python main.py scan             # Scan with the camera
    python main.py serve            # Start the HTTP API

Or use the CLI directly:
    python -m faceid scan --no-camera --fail-open
"""

import sys


def main():
    """Main entry point - delegates to CLI."""
    # If no arguments, show help
    if len(sys.argv) == 1:
        print(__doc__)
        print("Run 'python main.py --help' for more options")
        sys.exit(0)

    from faceid.cli import main as cli_main
    cli_main()


if __name__ == "__main__":
    main()
