#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Run the Marketplace Worker
# =============================================================================
# Consumes both queues: "email" for transactional mail and "default" for
# category count refreshes. Needs Redis at REDIS_URL.
#
# Usage:
#   python scripts/start_worker.py [concurrency]
# =============================================================================

from _common import banner

import sys

from workers.celery_app import celery_app

QUEUES = "default,email"


def main():
    concurrency = sys.argv[1] if len(sys.argv) > 1 else "2"

    banner("Artisan Marketplace Worker")
    print(f"Queues: {QUEUES}  Concurrency: {concurrency}")
    print("Ctrl+C to stop")
    print()

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        f"--queues={QUEUES}",
        f"--concurrency={concurrency}",
    ])


if __name__ == "__main__":
    main()
