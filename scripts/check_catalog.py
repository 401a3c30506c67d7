"""Validate a question catalog file before shipping it.

Usage:
    python scripts/check_catalog.py [path/to/questions.json]

Without a path, checks the catalog packaged with reviewdesk. Prints the
number of questions per category and exits 1 on a malformed payload.
"""

import logging
import os
import sys
from collections import Counter

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reviewdesk.catalog import load_catalog
from reviewdesk.errors import MalformedCatalogError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv: list[str]) -> int:
    path = argv[1] if len(argv) > 1 else None
    try:
        entries = load_catalog(path)
    except MalformedCatalogError as e:
        logger.error("Malformed catalog %s: %s", path or "(packaged)", e)
        return 1

    counts = Counter(entry.category for entry in entries)
    for category, count in counts.items():
        print(f"{category}: {count}")

    blank = [i for i, entry in enumerate(entries) if not entry.question.strip()]
    if blank:
        logger.warning("Blank questions at indices %s will not be shown", blank)
    print(f"Total: {len(entries)} questions")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
