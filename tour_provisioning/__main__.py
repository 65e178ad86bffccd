"""Provision a tour from a JSON file.

    python -m tour_provisioning tour.json

The file holds the form fields:

    {
      "title": "Summer Run",
      "description": "",
      "color": "#7E69AB",
      "departments": ["sound", "lights"],
      "dates": [{"date": "2024-07-10", "location": "Venue A"}]
    }

Uses the store selected by TP_STORE_BACKEND (in-memory by default).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import configure_logging
from .container import get_container
from .domain.errors import ProvisioningError
from .services import TourProvisioningService


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="tour_provisioning")
    parser.add_argument("tour_file", type=Path, help="JSON file with the tour form")
    parser.add_argument(
        "--idempotency-key",
        default=None,
        help="Return the earlier tour instead of creating a second one",
    )
    args = parser.parse_args(argv)

    configure_logging()
    data = json.loads(args.tour_file.read_text(encoding="utf-8"))

    try:
        service = get_container().resolve(TourProvisioningService)
        tour = service.provision_tour(
            title=data.get("title", ""),
            description=data.get("description", ""),
            color=data.get("color"),
            departments=data.get("departments", []),
            date_entries=data.get("dates", []),
            idempotency_key=args.idempotency_key,
        )
    except ProvisioningError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Tour created: {tour.id} ({tour.name}, {tour.start_date} -> {tour.end_date})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
