#!/usr/bin/env python3
"""Launch an AskTerminal shell session.

Usage:
    python run.py [config.yaml] [--debug] [--trace] [--verbose]
"""
import asyncio

from askterminal.main import main

if __name__ == "__main__":
    asyncio.run(main())
