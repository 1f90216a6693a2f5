"""Delete Gmail drafts whose subject contains a given marker.

Lists every draft, fetches its headers, and deletes the ones whose Subject
contains the marker text.

Usage:
    bin/cleanup-drafts.py "[stale]"             # Dry run (list only)
    bin/cleanup-drafts.py "[stale]" --delete    # Actually delete
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from gmail_rest.client import GmailClient, flatten_headers
from gmail_rest.config import GmailSettings
from gmail_rest.errors import ApiError


def list_all_drafts(client: GmailClient) -> list[dict]:
    """List all drafts with pagination."""
    drafts = []
    page_token = None
    while True:
        result = client.draft_list(max_results=100, page_token=page_token) or {}
        drafts.extend(result.get("drafts", []))
        page_token = result.get("nextPageToken")
        if not page_token:
            break
    return drafts


def main():
    parser = argparse.ArgumentParser(description="Delete drafts whose subject contains a marker")
    parser.add_argument("marker", help="Subject substring to match")
    parser.add_argument(
        "--delete", action="store_true", help="Actually delete (default is dry run)"
    )
    args = parser.parse_args()

    settings = GmailSettings.from_yaml()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with GmailClient(settings) as client:
        print("Listing all drafts...")
        drafts = list_all_drafts(client)
        print(f"Found {len(drafts)} total drafts")

        to_delete: list[tuple[str, str]] = []  # (draft_id, subject)
        for i, draft_stub in enumerate(drafts):
            draft_id = draft_stub["id"]
            data = client.draft_get(draft_id, format="metadata")
            message = flatten_headers(data.get("message", {}))
            subject = message.get("payload", {}).get("headers", {}).get("Subject", "")

            if args.marker in subject:
                to_delete.append((draft_id, subject))

            if (i + 1) % 10 == 0:
                print(f"  Checked {i + 1}/{len(drafts)}...")

        print(f"\nFound {len(to_delete)} drafts matching {args.marker!r}:")
        for draft_id, subject in to_delete:
            print(f"  [{draft_id}] {subject}")

        if not to_delete:
            print("Nothing to clean up.")
            return

        if not args.delete:
            print(f"\nDry run — pass --delete to remove {len(to_delete)} drafts")
            return

        print(f"\nDeleting {len(to_delete)} drafts...")
        deleted = 0
        for draft_id, subject in to_delete:
            try:
                client.draft_delete(draft_id)
                deleted += 1
                print(f"  Deleted: {subject}")
            except ApiError as e:
                print(f"  Failed to delete {draft_id}: {e} {e.body}")

        print(f"\nDone. Deleted {deleted}/{len(to_delete)} drafts.")


if __name__ == "__main__":
    main()
