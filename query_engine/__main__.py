#!/usr/bin/env python3
"""
Enable execution of the query_engine package as a module.

This allows running the package with: python -m query_engine
"""

from .cli.main import main

if __name__ == "__main__":
    main()
