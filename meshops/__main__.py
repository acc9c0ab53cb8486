"""meshops - Consolidate raw geometry into canonical indexed triangle meshes."""

import sys
from typing import Optional

from meshops.cli.app import app


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the meshops CLI."""
    try:
        app(argv)
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
