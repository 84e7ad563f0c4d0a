#!/usr/bin/env python3
"""
Run Agent — CoinGecko tools -> capabilities -> live agent server.

Usage:
    # Print the capabilities that would be registered
    python scripts/run_agent.py --list

    # Discover and register, but don't serve
    python scripts/run_agent.py --dry-run

    # Full run (needs OPENAI_API_KEY, OPENSERV_API_KEY, RPC_PROVIDER_URL, COINGECKO_API_KEY)
    python scripts/run_agent.py --config coinagent.yaml
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure src/ is on path for development
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from coinagent.bootstrap import main

if __name__ == "__main__":
    sys.exit(main())
