"""Seed a demo SQLite DB with sample bounty projects and issues.

This is intended for local demos of the search endpoint.
It does NOT contact GitHub or GitLab.

Usage:
  python scripts/seed_demo_data.py --db ./data/demo_bounty_sync.db --owner alice --overwrite
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def _sqlite_url_for_path(db_path: Path) -> str:
    # SQLAlchemy sqlite absolute path uses 4 slashes: sqlite:////abs/path
    p = db_path.expanduser().resolve()
    return f"sqlite:////{p}"


@dataclass(frozen=True)
class SeedResult:
    db_path: Path
    projects: int
    issues: int


def seed_demo_db(db_path: Path, owner: str = "alice", overwrite: bool = False) -> SeedResult:
    db_path = db_path.expanduser().resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    if overwrite and db_path.exists():
        db_path.unlink()

    # IMPORTANT: DATABASE_URL must be set before importing bounty_sync.* modules
    os.environ["DATABASE_URL"] = _sqlite_url_for_path(db_path)
    os.environ.setdefault("LOG_LEVEL", "WARNING")

    from bounty_sync.models.base import init_db, SessionLocal  # noqa: WPS433
    from bounty_sync.models import Issue, Project, ProviderAccount  # noqa: WPS433

    init_db()

    now = datetime.utcnow()

    db = SessionLocal()
    try:
        widgets = Project(
            title="widgets",
            owner=owner,
            copilot="bob",
            repo_url="https://github.com/acme/widgets",
            created_at=now - timedelta(days=10),
        )
        platform = Project(
            title="platform api",
            owner=owner,
            repo_url="https://gitlab.com/acme/platform/api",
            created_at=now - timedelta(days=9),
        )
        legacy = Project(
            title="legacy (archived)",
            owner=owner,
            repo_url="https://github.com/acme/legacy",
            archived=True,
            created_at=now - timedelta(days=30),
        )
        db.add_all([widgets, platform, legacy])
        db.commit()

        # Tokens are fake; the demo never calls the trackers.
        db.add_all(
            [
                ProviderAccount(handle=owner, provider="github", username=owner, access_token="demo-github-token"),
                ProviderAccount(handle=owner, provider="gitlab", username=owner, access_token="demo-gitlab-token"),
                ProviderAccount(handle="bob", provider="github", username="bobby", access_token="demo-github-token-2"),
            ]
        )
        db.commit()

        issues = []
        for i, project in enumerate([widgets, platform, legacy]):
            provider = "gitlab" if "gitlab" in project.repo_url else "github"
            for n in range(1, 6):
                assigned = n % 2 == 0
                issues.append(
                    Issue(
                        project_id=project.id,
                        provider=provider,
                        repository_id=1000 + i,
                        number=n,
                        title=f"[${n * 50}] Demo bounty {n} for {project.title}",
                        body="Demo issue body",
                        prizes=[n * 50],
                        labels=["Open for pickup"] if not assigned else ["Assigned"],
                        assignee="carol" if assigned else None,
                        assigned_at=now - timedelta(hours=n) if assigned else None,
                        status="open",
                        updated_at=now - timedelta(minutes=n * 7 + i),
                    )
                )
        db.add_all(issues)
        db.commit()
    finally:
        db.close()

    return SeedResult(db_path=db_path, projects=3, issues=len(issues))


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a demo Bounty Sync SQLite DB")
    parser.add_argument(
        "--db",
        default="./data/demo_bounty_sync.db",
        help="Path to SQLite DB file to create (default: ./data/demo_bounty_sync.db)",
    )
    parser.add_argument("--owner", default="alice", help="Handle owning the demo projects")
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Delete existing DB file first",
    )
    args = parser.parse_args()

    result = seed_demo_db(Path(args.db), owner=args.owner, overwrite=bool(args.overwrite))
    print(f"Seeded {result.projects} projects and {result.issues} issues at: {result.db_path}")


if __name__ == "__main__":
    main()
