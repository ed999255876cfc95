"""Tests for shell snippet checks."""

from chartdoc.checks import LintContext
from chartdoc.checks.shell import check_command, check_shell, split_commands
from chartdoc.model.config import LintConfig
from chartdoc.model.snippet import Severity, Snippet


def _check(content: str, language: str = "bash", config: LintConfig | None = None):
    snippet = Snippet(index=3, language=language, content=content, start_line=10)
    return check_shell(snippet, LintContext(config=config or LintConfig()))


def _codes(findings) -> list[str]:
    return [f.code for f in findings]


class TestCheckCommand:
    """Test single-command checks against the catalog."""

    def test_valid_helm_commands(self):
        for command in (
            ["helm", "create", "my-app"],
            ["helm", "install", "my-release", "./my-app", "-n", "demo", "--create-namespace"],
            ["helm", "install", "./my-app", "--generate-name"],
            ["helm", "upgrade", "--install", "my-release", "./my-app", "-f", "values-prod.yaml"],
            ["helm", "rollback", "my-release", "2"],
            ["helm", "repo", "add", "bitnami", "https://charts.bitnami.com/bitnami"],
            ["helm", "lint"],
        ):
            assert check_command(command) == [], command

    def test_unknown_subcommand(self):
        problems = check_command(["helm", "instal", "a", "b"])
        assert problems[0][0] == "UNKNOWN_SUBCOMMAND"
        assert problems[0][1] == Severity.ERROR

    def test_missing_nested_subcommand(self):
        assert check_command(["helm", "repo"])[0][0] == "BAD_ARITY"
        assert check_command(["helm", "repo", "ad", "x", "y"])[0][0] == "UNKNOWN_SUBCOMMAND"

    def test_arity(self):
        assert check_command(["helm", "upgrade", "my-release"])[0][0] == "BAD_ARITY"
        assert check_command(["helm", "create"])[0][0] == "BAD_ARITY"
        assert check_command(["helm", "create", "a", "b"])[0][0] == "BAD_ARITY"

    def test_rollback_revision(self):
        assert _codes_of(check_command(["helm", "rollback", "my-release", "latest"])) == ["BAD_REVISION"]
        assert check_command(["helm", "rollback", "my-release", "__ARG__"]) == []

    def test_port_forward_mapping(self):
        assert check_command(["kubectl", "port-forward", "svc/argocd-server", "-n", "argocd", "8080:443"]) == []
        assert check_command(["kubectl", "port-forward", "pod/web", ":80"]) == []
        problems = check_command(["kubectl", "port-forward", "svc/web", "8080-443"])
        assert _codes_of(problems) == ["BAD_PORT_MAPPING"]

    def test_port_forward_needs_mapping(self):
        assert _codes_of(check_command(["kubectl", "port-forward", "svc/web"])) == ["BAD_ARITY"]

    def test_unknown_command_is_info(self):
        problems = check_command(["frobnicate", "--now"])
        assert problems == [("UNKNOWN_COMMAND", Severity.INFO, "'frobnicate' is not a known command")]

    def test_extra_tools(self):
        assert check_command(["frobnicate"], extra_tools=["frobnicate"]) == []

    def test_env_prefix_and_passthrough(self):
        assert check_command(["KUBECONFIG=/tmp/kc", "kubectl", "get", "pods"]) == []
        assert check_command(["git", "push", "origin", "main"]) == []

    def test_argocd_commands(self):
        assert check_command(["argocd", "login", "localhost:8080", "--username", "admin"]) == []
        assert check_command(["argocd", "app", "sync", "my-app"]) == []
        assert _codes_of(check_command(["argocd", "app", "synk", "my-app"])) == ["UNKNOWN_SUBCOMMAND"]

    def test_logs_switches_and_selector(self):
        """Follow is a switch for logs and a selector replaces the pod name."""
        assert check_command(["kubectl", "logs", "-f", "deployment/my-app"]) == []
        assert check_command(["kubectl", "logs", "-l", "app=my-app"]) == []
        assert check_command(["kubectl", "logs", "--selector=app=my-app", "--tail", "20"]) == []
        assert check_command(["kubectl", "logs", "-p", "my-pod", "-c", "web"]) == []
        assert _codes_of(check_command(["kubectl", "logs", "-n", "demo"])) == ["BAD_ARITY"]

    def test_apply_still_reads_filename(self):
        assert check_command(["kubectl", "apply", "-f", "application.yaml"]) == []

    def test_getting_started_commands(self):
        """Commands from the ArgoCD getting-started steps are catalogued."""
        for command in (
            ["kubectl", "patch", "svc", "argocd-server", "-n", "argocd", "-p", '{"spec": {"type": "LoadBalancer"}}'],
            ["kubectl", "expose", "deployment", "web", "--port=80"],
            ["kubectl", "run", "tmp", "--rm", "-it", "--image=busybox", "--", "sh"],
            ["kubectl", "top", "pods", "-n", "demo"],
            ["kubectl", "explain", "deployment.spec"],
            ["kubectl", "cp", "web-0:/tmp/app.log", "./app.log"],
            ["argocd", "admin", "initial-password", "-n", "argocd"],
            ["argocd", "app", "get", "guestbook", "--namespace", "argocd"],
        ):
            assert check_command(command) == [], command


def _codes_of(problems) -> list[str]:
    return [code for code, _, _ in problems]


class TestSplitCommands:
    """Test splitting of token streams."""

    def test_separators_and_redirections(self):
        tokens = ["helm", "list", "&&", "kubectl", "get", "pods", ">", "out.txt", "2", ">&", "1", "|", "grep", "web"]
        assert split_commands(tokens) == [["helm", "list"], ["kubectl", "get", "pods"], ["grep", "web"]]


class TestCheckShell:
    """Test whole shell snippets."""

    def test_valid_snippet(self):
        content = (
            "# Install the chart\n"
            "helm install my-release ./my-app \\\n"
            "  --namespace demo \\\n"
            "  --create-namespace\n"
            "kubectl get pods -n demo  # check pods\n"
        )
        assert _check(content) == []

    def test_prompts_and_output_in_console_blocks(self):
        content = "$ helm list\nNAME    NAMESPACE  REVISION\nmy-app  default    1\n"
        assert _check(content, language="console") == []

    def test_placeholders(self):
        assert _check("helm rollback <release-name> <revision>\nhelm upgrade $RELEASE ./chart\n") == []

    def test_absolute_lines(self):
        findings = _check("helm list\n\nhelm instal a b\n")
        assert _codes(findings) == ["UNKNOWN_SUBCOMMAND"]
        assert findings[0].line == 12
        assert findings[0].snippet == 3

    def test_continuation_reports_first_line(self):
        findings = _check("helm version\nhelm upgrade \\\n  my-release\n")
        assert _codes(findings) == ["BAD_ARITY"]
        assert findings[0].line == 11

    def test_unbalanced_quotes(self):
        findings = _check("helm install web ./chart --set 'a=b\n")
        assert _codes(findings) == ["SHELL_SYNTAX"]

    def test_heredoc_body_is_not_checked(self):
        content = (
            "cat <<'EOF' | kubectl apply -f -\n"
            "apiVersion: argoproj.io/v1alpha1\n"
            "kind: Application\n"
            "metadata:\n"
            "  name: guestbook\n"
            "  annotations:\n"
            "    note: it's inline\n"
            "EOF\n"
            "kubectl get applications -n argocd\n"
            "helm instal a b\n"
        )
        findings = _check(content)
        assert _codes(findings) == ["UNKNOWN_SUBCOMMAND"]
        assert findings[0].line == 19

    def test_indented_heredoc_terminator(self):
        content = "kubectl apply -f - <<-EOF\n\tapiVersion: v1\n\tkind: Namespace\n\tEOF\nhelm list\n"
        assert _check(content) == []
