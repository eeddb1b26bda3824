#!/usr/bin/env python
"""Pagination examples against a GitLab instance.

GitLab returns list endpoints one page at a time and points at the next
page through the Link header. The client can walk those pages for you.

Set GITLAB_URL (e.g. https://gitlab.com/api/v4) and optionally
GITLAB_TOKEN, then run: python examples/pagination.py
"""

import os

from rest_harness import ApiKey, NoAuth
from rest_harness.bindings import GitlabClient
from rest_harness.exceptions import ClientError


def make_client() -> GitlabClient:
    client = GitlabClient(os.environ.get("GITLAB_URL", "https://gitlab.com/api/v4"))
    token = os.environ.get("GITLAB_TOKEN")
    client.login(ApiKey(token) if token else NoAuth())
    return client


def demo_single_page() -> None:
    """Plain request: only the first page."""
    print("\n1️⃣  Single Page")
    print("-" * 40)

    with make_client() as client:
        projects = client.request_json("GET", "/projects?per_page=5&order_by=id")
        for project in projects:
            print(f"    - {project['path_with_namespace']}")


def demo_autopaginate() -> None:
    """Fetch several pages in one call."""
    print("\n2️⃣  Autopaginate (3 pages of 5)")
    print("-" * 40)

    with make_client() as client:
        pages = client.autopaginate("GET", "/projects?per_page=5&order_by=id", max_pages=3)
        print(f"  Got {len(pages)} pages, {sum(len(p) for p in pages)} projects")


def demo_iter_pages() -> None:
    """Walk pages lazily and stop early."""
    print("\n3️⃣  Lazy Iteration With Early Stop")
    print("-" * 40)

    with make_client() as client:
        seen = 0
        for page in client.iter_pages("GET", "/projects?per_page=20&order_by=id"):
            seen += len(page)
            print(f"  ...{seen} projects so far")
            if seen >= 50:
                break


def main() -> None:
    print("=" * 50)
    print("rest-harness - Pagination Examples")
    print("=" * 50)

    try:
        demo_single_page()
        demo_autopaginate()
        demo_iter_pages()
    except ClientError as e:
        print(f"\n❌ {type(e).__name__}: {e}")
        return

    print("\n✅ Done!")


if __name__ == "__main__":
    main()
