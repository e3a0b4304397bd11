# FILE: ecopilot-backend/seed_firestore.py
# Seeds a development Firestore project.
#   python seed_firestore.py challenges --days 8
#   python seed_firestore.py sample-product
# Requires GOOGLE_APPLICATION_CREDENTIALS to point at a service account with Firestore access.

import sys
import logging
import datetime
import argparse
from google.cloud import firestore
from dotenv import load_dotenv
from logging_config import setup_logging
from daily_selector import generate_daily_challenges
from timezone_utils import date_range, get_current_utc_date, get_current_utc_datetime, parse_date_string

# --- SETUP & CONFIG ---
setup_logging()
load_dotenv()

SAMPLE_PRODUCT_ID = "sample_mineral_water"
SAMPLE_PRODUCT = {
    'name': 'Mineral Water (Sample)',
    'code': '0000000000000',
    'categories': ['Beverages', 'Water'],
    'eco_score': 'B',
    'co2_footprint': 0.02,
    'packaging': 'plastic bottle',
    'description': 'Sample mineral water entry for local testing',
}


def seed_challenges(db, start: datetime.date, days: int):
    """Writes `days` consecutive challenge documents in a single batch."""
    batch = db.batch()
    selections = []
    for day in date_range(start, days):
        selection = generate_daily_challenges(day)
        batch.set(db.collection('challenges').document(selection.date), selection.to_challenges_document())
        selections.append(selection)
    batch.commit()
    logging.info(f"✅ Seeded challenges for {days} day(s) starting {start.isoformat()}")
    return selections


def seed_sample_product(db):
    sample = dict(SAMPLE_PRODUCT, createdAt=get_current_utc_datetime().isoformat())
    db.collection('products').document(SAMPLE_PRODUCT_ID).set(sample, merge=True)
    logging.info(f"✅ Seeded sample product: products/{SAMPLE_PRODUCT_ID}")
    return sample


def build_parser():
    parser = argparse.ArgumentParser(description='Seed EcoPilot Firestore data.')
    subparsers = parser.add_subparsers(dest='command', required=True)

    challenges = subparsers.add_parser('challenges', help='Generate daily challenges for a range of dates.')
    challenges.add_argument('--days', type=int, default=8, help='Number of days, starting today (default: 8).')
    challenges.add_argument('--start', type=str, default=None, help='First date as YYYY-MM-DD (default: today, UTC).')

    subparsers.add_parser('sample-product', help='Upsert a sample product document.')
    return parser


def main(argv=None, db=None):
    args = build_parser().parse_args(argv)
    db = db or firestore.Client()

    if args.command == 'challenges':
        if args.days < 1:
            print("Error: --days must be at least 1.")
            return 2
        start = parse_date_string(args.start, default=get_current_utc_date())
        for selection in seed_challenges(db, start, args.days):
            print(f"\n📅 {selection.date}:")
            for entry in selection.entries:
                print(f"   {entry.icon} {entry.title} ({entry.rewardPoints} pts)")
        print(f"\n✅ Successfully generated challenges for {args.days} days!")
    else:
        seed_sample_product(db)
        print(f"Seeded sample product: products/{SAMPLE_PRODUCT_ID}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
