#!/usr/bin/env python3
"""
Backend Server Entry Point

Uvicorn launcher for the PR monitor dashboard.

Usage:
    # Development mode with auto-reload
    python backend/server.py

    # Custom host/port (port defaults to PORT from .env, then 3000)
    python backend/server.py --host 0.0.0.0 --port 8080

    # Production mode (no reload)
    python backend/server.py --no-reload

    # Or use uvicorn directly
    uvicorn backend.app:build_app --factory --reload
"""

import argparse
import sys
from pathlib import Path

# Allow running as "python backend/server.py" from the project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.config_loader import load_config  # noqa: E402


def main(argv=None):
    """Launch the dashboard server."""
    parser = argparse.ArgumentParser(
        description="PR Monitor Dashboard Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Development mode (auto-reload enabled)
  python backend/server.py

  # Custom host/port
  python backend/server.py --host 0.0.0.0 --port 8080

  # Production mode (no reload)
  python backend/server.py --no-reload
        """
    )

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to run the dashboard on (default: PORT from .env, then 3000)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload (use for production)"
    )

    args = parser.parse_args(argv)

    # Fail fast on missing GITHUB_TOKEN / GITHUB_USERNAME before starting uvicorn
    config = load_config()
    port = args.port or config.port

    print("=" * 80)
    print("GitHub Monitor")
    print("=" * 80)
    print(f"Dashboard running on http://{args.host}:{port}")
    print(f"Monitoring {config.username} in: {', '.join(config.repositories) or '(no repositories)'}")
    print("")
    print("Press Ctrl+C to stop the server")
    print("=" * 80)
    print("")

    import uvicorn
    uvicorn.run(
        "backend.app:build_app",
        factory=True,
        host=args.host,
        port=port,
        reload=not args.no_reload,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
