"""Permite `python -m dockside ...`."""

from __future__ import annotations

from dockside.cli.main import run

if __name__ == "__main__":
    run()
