"""Liminal dev launcher. Starts the API server in watch mode."""

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "13013")


def main():
    parser = argparse.ArgumentParser(description="Liminal dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--debug", action="store_true",
                        help="Log engine dispatch and resolution")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    # Build env for the server process so it picks up the same data dir
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    print(f"Starting API on http://localhost:{PORT} ...")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "liminal.app:app", "--reload", "--host", HOST, "--port", PORT],
        cwd=ROOT, env=env,
    )
    try:
        proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        proc.terminate()
        proc.wait()


if __name__ == "__main__":
    main()
