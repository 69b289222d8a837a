# -*- coding: utf-8 -*-
"""
Sidescan Mosaic Export Example.

Discovers every indexed sidescan raster under a survey folder, builds a
geo-rectified mosaic of each at the requested ground resolution, and
writes them as RGBA PNG files. Builds run on the shared background pool.

Usage:
  python mosaic_export.py <survey_folder> <output_folder>
  python mosaic_export.py <survey_folder> <output_folder> --res 5
  python mosaic_export.py --help

Dependencies
------------
numpy
scipy
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
from pathlib import Path

# sidescan
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sidescan.IO import RasterCatalog
from sidescan.render import MosaicLayer, shutdown


def parse_args():
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Export geo-rectified PNG mosaics of sidescan rasters.",
    )
    parser.add_argument(
        "survey",
        type=Path,
        help="Folder containing rasterIndex folders.",
    )
    parser.add_argument(
        "output",
        type=Path,
        help="Folder to write PNG mosaics into.",
    )
    parser.add_argument(
        "--res",
        type=float,
        default=2.0,
        help="Mosaic resolution in pixels per meter (default: 2).",
    )
    return parser.parse_args()


def main():
    """Discover rasters, export mosaics, and report results."""
    args = parse_args()

    with RasterCatalog(args.survey) as catalog:
        layer = MosaicLayer.from_catalog(catalog)
        print(f"Found {len(layer)} raster(s) under {args.survey}")

        failed = 0
        for gate, future in zip(layer.gates, layer.export(args.output,
                                                          args.res)):
            try:
                path = future.result()
                print(f"  {gate.raster.filename} -> {path}")
            except Exception as e:  # report and keep exporting the rest
                failed += 1
                print(f"  {gate.raster.filename}: FAILED ({e})")

        layer.close()
    shutdown()

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
