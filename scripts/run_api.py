#!/usr/bin/env python
"""
Start the quote API with uvicorn.

Usage:
    python scripts/run_api.py            # PORT defaults to 4000
    RELOAD=1 python scripts/run_api.py   # auto-reload on code changes
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_path, env.get("PYTHONPATH")) if p)

    port = env.get("PORT", "4000")
    command = [
        sys.executable, "-m", "uvicorn",
        "rental_quote.api.main:app",
        "--host", env.get("HOST", "0.0.0.0"),
        "--port", port,
    ]
    if env.get("RELOAD") == "1":
        command.append("--reload")

    print(f"Starting Rental Quote API on port {port}...")
    try:
        subprocess.run(command, env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
