"""
CLI entry point for hydrowave.

This module enables running hydrowave as a Python module:
    $ python -m hydrowave run hydro_inputs.json --hydro hydro_data.json
    $ python -m hydrowave --version
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
