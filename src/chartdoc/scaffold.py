"""Render the artifacts a Helm + ArgoCD tutorial walks through.

The output is a minimal chart (Deployment and Service), the ArgoCD
Application that syncs it, and a GitHub Actions workflow that lints and
packages it.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from chartdoc.model.manifests import CHART_NAME_RE

HELPERS_TEMPLATE = """\
{{/* Chart name truncated to the Kubernetes label limit */}}
{{- define "__NAME__.name" -}}
{{- .Chart.Name | trunc 63 | trimSuffix "-" }}
{{- end }}

{{- define "__NAME__.fullname" -}}
{{- printf "%s-%s" .Release.Name .Chart.Name | trunc 63 | trimSuffix "-" }}
{{- end }}

{{- define "__NAME__.selectorLabels" -}}
app.kubernetes.io/name: {{ include "__NAME__.name" . }}
app.kubernetes.io/instance: {{ .Release.Name }}
{{- end }}

{{- define "__NAME__.labels" -}}
helm.sh/chart: {{ printf "%s-%s" .Chart.Name .Chart.Version }}
{{ include "__NAME__.selectorLabels" . }}
app.kubernetes.io/managed-by: {{ .Release.Service }}
{{- end }}
"""

DEPLOYMENT_TEMPLATE = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: {{ include "__NAME__.fullname" . }}
  labels:
    {{- include "__NAME__.labels" . | nindent 4 }}
spec:
  replicas: {{ .Values.replicaCount }}
  selector:
    matchLabels:
      {{- include "__NAME__.selectorLabels" . | nindent 6 }}
  template:
    metadata:
      labels:
        {{- include "__NAME__.selectorLabels" . | nindent 8 }}
    spec:
      containers:
        - name: {{ .Chart.Name }}
          image: "{{ .Values.image.repository }}:{{ .Values.image.tag | default .Chart.AppVersion }}"
          imagePullPolicy: {{ .Values.image.pullPolicy }}
          ports:
            - name: http
              containerPort: {{ .Values.service.targetPort }}
              protocol: TCP
          {{- with .Values.resources }}
          resources:
            {{- toYaml . | nindent 12 }}
          {{- end }}
"""

SERVICE_TEMPLATE = """\
apiVersion: v1
kind: Service
metadata:
  name: {{ include "__NAME__.fullname" . }}
  labels:
    {{- include "__NAME__.labels" . | nindent 4 }}
spec:
  type: {{ .Values.service.type }}
  ports:
    - port: {{ .Values.service.port }}
      targetPort: http
      protocol: TCP
      name: http
  selector:
    {{- include "__NAME__.selectorLabels" . | nindent 4 }}
"""


class ScaffoldConfig(BaseModel):
    """Settings for the generated chart, Application and workflow."""

    name: str = Field(min_length=1, max_length=53)
    repo_url: str = Field(min_length=1)
    chart_version: str = Field(default="0.1.0")
    app_version: str = Field(default="1.0.0")

    # Chart values
    image_repository: str = Field(default="nginx")
    image_tag: str = Field(default="")
    replicas: int = Field(default=2, ge=0)
    service_type: str = Field(default="ClusterIP")
    service_port: int = Field(default=80, ge=1, le=65535)
    target_port: int = Field(default=80, ge=1, le=65535)

    # ArgoCD
    argocd_namespace: str = Field(default="argocd")
    project: str = Field(default="default")
    target_revision: str = Field(default="main")
    namespace: str = Field(default="default")
    destination_server: str = Field(default="https://kubernetes.default.svc")
    automated_sync: bool = Field(default=True)
    prune: bool = Field(default=True)
    self_heal: bool = Field(default=True)
    create_namespace: bool = Field(default=True)

    # GitHub Actions
    branch: str = Field(default="main")
    helm_version: str = Field(default="v3.14.0")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not CHART_NAME_RE.match(value):
            raise ValueError("name must be lowercase alphanumerics and '-'")
        return value

    @property
    def chart_path(self) -> str:
        return f"charts/{self.name}"


def _dump(data: dict[str, Any], path: Path) -> None:
    with path.open("w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def render_chart_metadata(config: ScaffoldConfig) -> dict[str, Any]:
    return {
        "apiVersion": "v2",
        "name": config.name,
        "description": f"A Helm chart for {config.name}",
        "type": "application",
        "version": config.chart_version,
        "appVersion": config.app_version,
    }


def render_values(config: ScaffoldConfig) -> dict[str, Any]:
    return {
        "replicaCount": config.replicas,
        "image": {
            "repository": config.image_repository,
            "tag": config.image_tag,
            "pullPolicy": "IfNotPresent",
        },
        "service": {
            "type": config.service_type,
            "port": config.service_port,
            "targetPort": config.target_port,
        },
        "resources": {},
    }


def render_chart(config: ScaffoldConfig, output_dir: Path) -> dict[str, Path]:
    """Write the chart files under output_dir/charts/<name>.

    Returns:
        Dictionary mapping artifact names to written paths
    """
    chart_dir = output_dir / config.chart_path
    templates_dir = chart_dir / "templates"
    templates_dir.mkdir(parents=True, exist_ok=True)

    files = {
        "chart": chart_dir / "Chart.yaml",
        "values": chart_dir / "values.yaml",
        "helpers": templates_dir / "_helpers.tpl",
        "deployment": templates_dir / "deployment.yaml",
        "service": templates_dir / "service.yaml",
    }
    _dump(render_chart_metadata(config), files["chart"])
    _dump(render_values(config), files["values"])
    files["helpers"].write_text(HELPERS_TEMPLATE.replace("__NAME__", config.name))
    files["deployment"].write_text(DEPLOYMENT_TEMPLATE.replace("__NAME__", config.name))
    files["service"].write_text(SERVICE_TEMPLATE.replace("__NAME__", config.name))
    return files


def render_application(config: ScaffoldConfig) -> dict[str, Any]:
    """Render the argoproj.io/v1alpha1 Application syncing the chart."""
    spec: dict[str, Any] = {
        "project": config.project,
        "source": {
            "repoURL": config.repo_url,
            "targetRevision": config.target_revision,
            "path": config.chart_path,
            "helm": {"valueFiles": ["values.yaml"]},
        },
        "destination": {
            "server": config.destination_server,
            "namespace": config.namespace,
        },
    }

    sync_policy: dict[str, Any] = {}
    if config.automated_sync:
        sync_policy["automated"] = {"prune": config.prune, "selfHeal": config.self_heal}
    if config.create_namespace:
        sync_policy["syncOptions"] = ["CreateNamespace=true"]
    if sync_policy:
        spec["syncPolicy"] = sync_policy

    return {
        "apiVersion": "argoproj.io/v1alpha1",
        "kind": "Application",
        "metadata": {"name": config.name, "namespace": config.argocd_namespace},
        "spec": spec,
    }


def render_workflow(config: ScaffoldConfig) -> dict[str, Any]:
    """Render the GitHub Actions workflow that lints and packages the chart."""
    return {
        "name": f"Helm chart {config.name}",
        "on": {
            "push": {"branches": [config.branch], "paths": [f"{config.chart_path}/**"]},
            "pull_request": {"paths": [f"{config.chart_path}/**"]},
        },
        "jobs": {
            "lint": {
                "runs-on": "ubuntu-latest",
                "steps": [
                    {"name": "Checkout", "uses": "actions/checkout@v4"},
                    {
                        "name": "Set up Helm",
                        "uses": "azure/setup-helm@v4",
                        "with": {"version": config.helm_version},
                    },
                    {"name": "Lint chart", "run": f"helm lint {config.chart_path}"},
                    {
                        "name": "Render templates",
                        "run": f"helm template {config.name} {config.chart_path}",
                    },
                    {"name": "Package chart", "run": f"helm package {config.chart_path} -d dist"},
                ],
            }
        },
    }


def scaffold(config: ScaffoldConfig, output_dir: Path) -> dict[str, Path]:
    """Write chart, Application manifest and workflow under output_dir.

    Returns:
        Dictionary mapping artifact names to written paths
    """
    files = render_chart(config, output_dir)

    argocd_dir = output_dir / "argocd"
    argocd_dir.mkdir(parents=True, exist_ok=True)
    files["application"] = argocd_dir / f"{config.name}-application.yaml"
    _dump(render_application(config), files["application"])

    workflows_dir = output_dir / ".github" / "workflows"
    workflows_dir.mkdir(parents=True, exist_ok=True)
    files["workflow"] = workflows_dir / f"{config.name}-chart.yaml"
    _dump(render_workflow(config), files["workflow"])

    return files
