"""
Command-line entry for the kernelconv package.

Usage
-----
$ python -m kernelconv apply --in in.png --out out.png --kernel box:size=3
"""

from .cli.kernelconv_cli import main

if __name__ == "__main__":
    raise SystemExit(main())
