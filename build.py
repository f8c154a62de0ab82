"""
Build a single-file, windowed executable using PyInstaller.

Usage:
    python build.py

Output:
    dist/LatentChat.exe (dist/LatentChat on macOS/Linux)
"""

import subprocess
import sys
from pathlib import Path


def build_executable():
    here = Path(__file__).parent
    entry = here / "latentchat" / "main.py"
    name = "LatentChat"

    cmd = [
        sys.executable, "-m", "PyInstaller",
        "--onefile",
        "--windowed",
        "--name", name,
        "--paths", str(here),
        str(entry),
    ]
    print("Running:", " ".join(cmd))
    subprocess.check_call(cmd)


if __name__ == "__main__":
    build_executable()
