"""Flarewatch v1.0 — CLI entry point."""

import logging
import sys

from flarewatch import analyze, generate_report

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    path = sys.argv[1] if len(sys.argv) > 1 else "test_data.json"
    result = analyze(path)
    print(generate_report(result))
