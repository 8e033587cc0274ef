#!/usr/bin/env python3
"""Replay the demo game through the brand bots.

Usage:
    python scripts/run_demo.py --config configs/dev.yaml
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from blitz_markets.agent.runner import main

if __name__ == "__main__":
    main()
