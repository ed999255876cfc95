"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def cli_runner():
    """CLI runner for typer testing."""
    return CliRunner()


@pytest.fixture
def tutorial_text():
    """Tutorial covering chart, values, template, CI and ArgoCD snippets."""
    return (FIXTURES_DIR / "tutorial.md").read_text(encoding="utf-8")


@pytest.fixture
def sample_application():
    """Sample ArgoCD Application manifest data."""
    return {
        "apiVersion": "argoproj.io/v1alpha1",
        "kind": "Application",
        "metadata": {"name": "my-app", "namespace": "argocd"},
        "spec": {
            "project": "default",
            "source": {
                "repoURL": "https://github.com/example/my-app.git",
                "targetRevision": "main",
                "path": "charts/my-app",
            },
            "destination": {
                "server": "https://kubernetes.default.svc",
                "namespace": "demo",
            },
            "syncPolicy": {
                "automated": {"prune": True, "selfHeal": True},
                "syncOptions": ["CreateNamespace=true"],
            },
        },
    }


@pytest.fixture
def sample_workflow():
    """Sample GitHub Actions workflow data, as PyYAML loads it."""
    return {
        "name": "Helm CI",
        True: {"push": {"branches": ["main"]}},
        "jobs": {
            "lint": {
                "runs-on": "ubuntu-latest",
                "steps": [
                    {"uses": "actions/checkout@v4"},
                    {"run": "helm lint ./my-app"},
                ],
            }
        },
    }


@pytest.fixture
def write_markdown(tmp_path):
    """Factory fixture to create Markdown files."""

    def _write(content: str, name: str = "README.md") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
