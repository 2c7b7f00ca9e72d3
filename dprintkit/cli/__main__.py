"""
Entry point for running DprintKit CLI as a module.

Usage: python -m dprintkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
