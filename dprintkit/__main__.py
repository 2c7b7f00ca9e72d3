"""
Entry point for running DprintKit CLI as a module.

Usage: python -m dprintkit [command] [options]
"""

from dprintkit.cli.parser import main

if __name__ == "__main__":
    main()
