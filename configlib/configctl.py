#!/usr/bin/env python3
"""
configctl - read and write layered configuration files.

Usage:
    configctl [--file PATH | --global | --repo DIR] get NAME [--type int|bool]
    configctl [--file PATH | --global | --repo DIR] set NAME VALUE [--type int|bool]
    configctl list
    configctl env-bool NAME
    configctl serve --port 8000
"""

import sys
from layered_config.cli import main

if __name__ == "__main__":
    sys.exit(main())
