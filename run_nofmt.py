#!/usr/bin/env python3
"""
nofmt - gofmt that leaves // go:nofmt regions alone

Simple usage:
    python run_nofmt.py main.go            # Print formatted main.go
    python run_nofmt.py -w ./pkg           # Rewrite every .go file under ./pkg
    cat main.go | python run_nofmt.py      # Format standard input
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from nofmt.cli import app

if __name__ == "__main__":
    app()
