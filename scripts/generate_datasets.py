#!/usr/bin/env python3
from __future__ import annotations

import argparse

from sccdag.generator import DATA_DIR, DEFAULT_SEED, generate_all_datasets


def main() -> None:
    ap = argparse.ArgumentParser(description="Generate the small/medium/large graph fixtures as JSON.")
    ap.add_argument("--data-dir", default=str(DATA_DIR), help="Directory to write the JSON files to.")
    ap.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed.")
    args = ap.parse_args()

    written = generate_all_datasets(args.data_dir, seed=args.seed)
    print("Saved:")
    for p in written:
        print(" -", p)


if __name__ == "__main__":
    main()
