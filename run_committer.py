"""Convenience shim to run the Azure Search committer."""

from __future__ import annotations

import sys

from src.azuresearch.runner import main as committer_main


if __name__ == "__main__":
    sys.exit(committer_main(sys.argv[1:]))
