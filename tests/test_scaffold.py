"""Tests for artifact scaffolding."""

import pydantic
import pytest
import yaml

from chartdoc.lint import lint_text
from chartdoc.model.manifests import ArgoApplication, GitHubWorkflow
from chartdoc.scaffold import ScaffoldConfig, render_application, render_workflow, scaffold


@pytest.fixture
def scaffold_config():
    """Sample scaffold configuration."""
    return ScaffoldConfig(
        name="guestbook",
        repo_url="https://github.com/example/gitops.git",
        image_repository="ghcr.io/example/guestbook",
        image_tag="1.2.0",
        namespace="guestbook",
    )


class TestScaffoldConfig:
    """Test scaffold configuration validation."""

    def test_rejects_invalid_name(self):
        with pytest.raises(pydantic.ValidationError):
            ScaffoldConfig(name="Guest_Book", repo_url="https://github.com/example/gitops.git")

    def test_chart_path(self, scaffold_config):
        assert scaffold_config.chart_path == "charts/guestbook"


class TestRenderApplication:
    """Test the ArgoCD Application rendering."""

    def test_application_is_valid(self, scaffold_config):
        app = ArgoApplication.model_validate(render_application(scaffold_config))
        assert app.spec.source.path == "charts/guestbook"
        assert app.spec.source.targetRevision == "main"
        assert app.spec.destination.namespace == "guestbook"
        assert app.spec.syncPolicy.automated.prune is True
        assert app.spec.syncPolicy.syncOptions == ["CreateNamespace=true"]

    def test_manual_sync(self, scaffold_config):
        config = scaffold_config.model_copy(update={"automated_sync": False, "create_namespace": False})
        assert "syncPolicy" not in render_application(config)["spec"]


class TestRenderWorkflow:
    """Test the GitHub Actions workflow rendering."""

    def test_workflow_round_trips_through_yaml(self, scaffold_config):
        """The dumped workflow keeps its trigger key when loaded back."""
        loaded = yaml.safe_load(yaml.dump(render_workflow(scaffold_config), sort_keys=False))
        workflow = GitHubWorkflow.model_validate(loaded)
        assert workflow.on["push"]["branches"] == ["main"]
        runs = [step.run for step in workflow.steps() if step.run]
        assert runs[0] == "helm lint charts/guestbook"


class TestScaffold:
    """Test writing all artifacts."""

    def test_writes_all_artifacts(self, scaffold_config, tmp_path):
        files = scaffold(scaffold_config, tmp_path)
        assert set(files) == {"chart", "values", "helpers", "deployment", "service", "application", "workflow"}
        assert files["application"] == tmp_path / "argocd" / "guestbook-application.yaml"
        assert files["workflow"] == tmp_path / ".github" / "workflows" / "guestbook-chart.yaml"
        assert all(path.exists() for path in files.values())

        values = yaml.safe_load(files["values"].read_text())
        assert values["image"] == {"repository": "ghcr.io/example/guestbook", "tag": "1.2.0", "pullPolicy": "IfNotPresent"}

    def test_artifacts_pass_document_checks(self, scaffold_config, tmp_path):
        """A tutorial quoting the generated files has no findings."""
        files = scaffold(scaffold_config, tmp_path)
        parts = []
        for name in ("values", "deployment", "service", "application", "workflow"):
            parts.append(f"## {name}\n\n```yaml\n{files[name].read_text()}```\n")
        report = lint_text("\n".join(parts))
        assert report.findings == []
        assert [s.kind.value for s in report.snippets] == [
            "helm-values",
            "helm-template",
            "helm-template",
            "argocd-application",
            "github-workflow",
        ]
