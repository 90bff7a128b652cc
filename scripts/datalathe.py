#!/usr/bin/env python3
"""
datalathe.py - Entry point for DataLathe TUI.

Usage:
    python scripts/datalathe.py                            # Connect to $DATALATHE_URL or localhost:3000
    python scripts/datalathe.py --url http://engine:3000   # Prefill another engine URL
    python scripts/datalathe.py --debug                    # Write debug logs to tui_debug.log
    python scripts/datalathe.py --help
"""

import argparse
import os
import sys


def main():
    """Main entry point."""
    # Load .env file from current directory or parents
    from dotenv import load_dotenv
    load_dotenv()

    from datalathe_tui.client import DEFAULT_URL

    parser = argparse.ArgumentParser(
        description="DataLathe TUI - Terminal client for the DataLathe engine"
    )
    parser.add_argument(
        "--url",
        default=os.environ.get("DATALATHE_URL") or DEFAULT_URL,
        help="DataLathe engine URL (default: $DATALATHE_URL or %(default)s)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to tui_debug.log"
    )

    args = parser.parse_args()

    # Check for textual
    try:
        import textual  # noqa: F401
    except ImportError:
        print("Error: textual package not installed.", file=sys.stderr)
        print("Install with: pip install textual", file=sys.stderr)
        sys.exit(1)

    # Run the TUI
    from datalathe_tui.app import run_tui
    run_tui(args.url, debug=args.debug)


if __name__ == "__main__":
    main()
