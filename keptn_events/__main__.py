"""`keptn-events` console script and `python -m keptn_events`.

Reads a .env file from the working directory before the KEPTN_* settings are
resolved, then lists the matching events.
"""

from __future__ import annotations

import sys

from dotenv import load_dotenv

from keptn_events.cli import parse_args, run


def main() -> None:
    load_dotenv()
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
