"""Lanza la CLI `dockside` desde un checkout, sin `pip install -e .`.

    python main.py containers --all
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from dockside.cli.main import run  # noqa: E402

if __name__ == "__main__":
    run()
