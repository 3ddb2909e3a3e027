"""Entry point for python -m pcio

Usage:
  python -m pcio build
  python -m pcio package --project-dir my_game
  python -m pcio rules
  python -m pcio inspect output.pcio
"""

from pcio.cli import cli

if __name__ == "__main__":
    cli(prog_name="pcio")
