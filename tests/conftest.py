"""Shared snapshot fixtures."""

import datetime
import json

import pytest

from repolens.snapshot import RawSnapshot, TreeEntry

FIXED_NOW = datetime.datetime(2024, 1, 11, tzinfo=datetime.timezone.utc)

NODE_README = """# WebApp

A web app for teams.

## Features

- **Fast** server rendering with streaming
- Type-safe `API` routes
- Built-in analytics dashboard
- Dark mode

## Getting Started

```bash
npm install
npm run dev
```

## Design

- Prefer server components over client state
- Keep the API surface small
"""


def make_tree(*paths):
    return tuple(TreeEntry(path=p, type="tree" if p.endswith("/") else "blob") for p in paths)


@pytest.fixture
def empty_snapshot():
    return RawSnapshot(owner="octo", repo="empty")


@pytest.fixture
def node_snapshot():
    package = {
        "name": "webapp",
        "type": "module",
        "scripts": {"test": "vitest"},
        "engines": {"node": ">=18"},
        "dependencies": {"react": "^18", "react-dom": "^18", "next": "^14"},
        "devDependencies": {"typescript": "^5", "vitest": "^1"},
    }
    return RawSnapshot(
        owner="acme",
        repo="webapp",
        meta={
            "name": "webapp",
            "full_name": "acme/webapp",
            "description": "A web app for teams",
            "stargazers_count": 2500,
            "forks_count": 1234,
            "watchers_count": 80,
            "subscribers_count": 40,
            "open_issues_count": 7,
            "language": "TypeScript",
            "topics": ["react", "dashboard"],
            "license": {"name": "MIT License"},
            "html_url": "https://github.com/acme/webapp",
            "created_at": "2020-05-01T00:00:00Z",
            "updated_at": "2024-01-01T00:00:00Z",
            "default_branch": "trunk",
        },
        readme=NODE_README,
        file_tree=make_tree(
            "src/index.ts",
            "src/api/routes.ts",
            "src/components/Header.tsx",
            "tests/app.test.ts",
            ".github/workflows/ci.yml",
            "Dockerfile",
            "CONTRIBUTING.md",
            "README.md",
            "docs/guide.md",
        ),
        releases=tuple({"tag_name": f"v1.{i}"} for i in range(6)),
        contributors=tuple({"login": f"dev{i}"} for i in range(12)),
        languages={"TypeScript": 7000, "JavaScript": 2000, "CSS": 1000},
        config_contents={"package.json": json.dumps(package)},
    )


@pytest.fixture
def python_snapshot():
    return RawSnapshot(
        owner="lab",
        repo="trainer",
        meta={
            "name": "trainer",
            "description": "Machine learning pipeline for data teams",
            "language": "Python",
            "stargazers_count": 150,
        },
        readme="# Trainer\n\nTrain models on tabular data.\n",
        file_tree=make_tree("trainer/cli.py", "trainer/worker.py", "requirements.txt"),
        languages={"Python": 50, "Shell": 50},
        config_contents={"requirements.txt": "fastapi==0.110\nSQLAlchemy>=2\ntorch\n"},
    )
