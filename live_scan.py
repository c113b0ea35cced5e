#!/usr/bin/env python3
"""
Live Camera Scan Script
Scans barcodes from the local camera and records confirmations

Each code must be read in consecutive frames before it is accepted.
Confirmed codes are classified against the reference set and printed
with the suggested inventory action.
"""

import argparse
import logging
import sys

from scanstock.catalog import get_reference_catalog
from scanstock.config import get_settings
from scanstock.db import DatabaseManager, init_db
from scanstock.scanner import BarcodeScanner
from scanstock.services import InventoryService, ScanSession


def live_scan(duration: int, camera: int) -> int:
    """Run the live scan loop and print each confirmed scan"""
    catalog = get_reference_catalog()
    if not catalog.load():
        print(f"⚠️  Reference set not loaded ({catalog.last_error})")
        print("All new scans will be reported as not in reference")

    init_db()
    session = ScanSession.from_settings(catalog)
    scanner = BarcodeScanner(camera_index=camera)

    with DatabaseManager().session_scope() as db:
        outcomes = scanner.scan_camera_live(
            session,
            inventory=InventoryService(db),
            duration_seconds=duration
        )

        for outcome in outcomes:
            result = outcome.to_dict()
            action = result["action"] or "-"
            print(f"{result['code']:<20} {result['status']:<20} {action}")

    print()
    print(f"Accepted codes: {len(session.engine.accepted)}")
    return 0


if __name__ == "__main__":
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Live camera barcode scan")
    parser.add_argument("--duration", type=int, default=30, help="Seconds to scan (0 = until 'q')")
    parser.add_argument("--camera", type=int, default=settings.camera_index, help="Camera index")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    print("=" * 60)
    print("LIVE BARCODE SCAN")
    print("=" * 60)
    print()
    sys.exit(live_scan(args.duration, args.camera))
