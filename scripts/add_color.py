#!/usr/bin/env python3
"""
Add a color to the diary palette.

Usage:
  python scripts/add_color.py --name mint --hex "#9EE6B8"
"""
from __future__ import annotations

import argparse
import re
import sys

from palette.db.session import transaction
from palette.repositories.sql_repository import SQLRepository

HEX_PATTERN = re.compile(r"#[0-9A-Fa-f]{6}")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Add a color to the diary palette")
    ap.add_argument("--name", required=True, help="Color name (e.g. mint)")
    ap.add_argument("--hex", required=True, help="Hex code (e.g. #9EE6B8)")
    args = ap.parse_args(argv)

    name = (args.name or "").strip()
    if not name:
        raise SystemExit("Invalid name")
    hex_code = (args.hex or "").strip().upper()
    if not HEX_PATTERN.fullmatch(hex_code):
        raise SystemExit("Hex code must look like #RRGGBB")

    with transaction() as session:
        repo = SQLRepository(session)
        if any(color.hex_code.upper() == hex_code for color in repo.list_colors()):
            raise SystemExit(f"Color '{hex_code}' already exists")
        color = repo.create_color(name, hex_code)
    print("OK: color added")
    print(f"  id: {color.id}")
    print(f"  name: {name}")
    print(f"  hex: {hex_code}")
    return color.id


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
