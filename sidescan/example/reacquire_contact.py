# -*- coding: utf-8 -*-
"""
Contact Reacquisition Example.

Loads a contact JSON file, searches every sidescan raster under a survey
folder for further sightings of it, prints the hits, and optionally writes
the updated contact back.

Usage:
  python reacquire_contact.py <contact.json> <survey_folder>
  python reacquire_contact.py <contact.json> <survey_folder> --save
  python reacquire_contact.py --help

Dependencies
------------
numpy
pyproj
shapely
Pillow

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
import argparse
import sys
from datetime import timedelta
from pathlib import Path

# sidescan
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sidescan.IO import load_contact, save_contact
from sidescan.search import search_folder


def parse_args():
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Search sidescan rasters for re-observations of a contact.",
    )
    parser.add_argument(
        "contact",
        type=Path,
        help="Contact JSON file.",
    )
    parser.add_argument(
        "survey",
        type=Path,
        help="Folder containing rasterIndex folders.",
    )
    parser.add_argument(
        "--distance",
        type=float,
        default=2.0,
        help="Acceptance distance in meters (default: 2).",
    )
    parser.add_argument(
        "--window",
        type=float,
        default=5.0,
        help="Exclusion window around the first sighting, seconds (default: 5).",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write the new observations back to the contact file.",
    )
    return parser.parse_args()


def main():
    """Run the search and print the observations found."""
    args = parse_args()

    contact = load_contact(args.contact)
    print(f"Contact {contact.label or contact.uuid} at "
          f"({contact.latitude:.6f}, {contact.longitude:.6f})")

    found = search_folder(
        args.survey, contact,
        acceptance_distance=args.distance,
        exclude_window=timedelta(seconds=args.window),
    )

    print()
    print(f"{'#':>3}  {'Time':<26}  {'Latitude':>12}  {'Longitude':>12}  Raster")
    print("-" * 80)
    for i, obs in enumerate(found):
        print(f"{i + 1:3d}  {obs.timestamp.isoformat():<26}  "
              f"{obs.latitude:12.7f}  {obs.longitude:12.7f}  "
              f"{obs.raster_filename}")
    print()
    print(f"{len(found)} new observation(s)")

    if args.save and found:
        save_contact(contact, args.contact)
        print(f"Saved to {args.contact}")


if __name__ == "__main__":
    main()
