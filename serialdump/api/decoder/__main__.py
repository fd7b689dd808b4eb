"""
`python -m serialdump.api.decoder` entrypoint.

The CLI lives in `serialdump/api/decoder/cli.py` so that importing the
decoder from library code does not pull in argparse wiring.
"""

from __future__ import annotations

from . import cli


def main() -> int:
    """Delegate to `serialdump.api.decoder.cli.main`."""
    return cli.main()


if __name__ == "__main__":
    raise SystemExit(main())
