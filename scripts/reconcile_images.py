"""Retry image deletions that failed when their records were removed."""

import argparse

from app import create_app
from utils.image_cleanup import pending_cleanup_tasks, run_image_cleanup


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dry-run", action="store_true", help="list pending deletions only")
    parser.add_argument("--limit", type=int, default=None, help="maximum tasks to process")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        tasks = pending_cleanup_tasks(args.limit)
        print(f"{len(tasks)} pending image deletion(s)")
        if args.dry_run:
            for task in tasks:
                print(f"  {task.public_id} ({task.source}, {task.attempts} attempt(s))")
            return

        summary = run_image_cleanup(tasks)
        print(f"Deleted {summary['successful']}, failed {summary['failed']}")


if __name__ == "__main__":
    main()
