"""Catalog of command-line tools that tutorials invoke.

Each subcommand records how many positional arguments it takes and which
flags consume the following word as their value, so that invocations can be
checked without running the tools.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Subcommand:
    """A tool subcommand and its positional-argument arity."""

    name: str
    min_args: int = 0
    max_args: int | None = None
    # Nested subcommands, e.g. `helm repo add`
    children: dict[str, "Subcommand"] = field(default_factory=dict)
    # Tool value flags that are switches for this subcommand, e.g. `kubectl logs -f`
    switch_flags: frozenset[str] = frozenset()
    # A label selector may stand in for the positional arguments
    selectable: bool = False


@dataclass(frozen=True)
class Tool:
    """A command-line tool."""

    name: str
    subcommands: dict[str, Subcommand] = field(default_factory=dict)
    value_flags: frozenset[str] = frozenset()
    # Tool accepted as-is, arguments are not checked
    passthrough: bool = False


def _sub(
    name: str,
    min_args: int = 0,
    max_args: int | None = None,
    *,
    switch_flags: frozenset[str] = frozenset(),
    selectable: bool = False,
    **children: Subcommand,
) -> Subcommand:
    return Subcommand(
        name=name,
        min_args=min_args,
        max_args=max_args,
        children=children,
        switch_flags=switch_flags,
        selectable=selectable,
    )


HELM_VALUE_FLAGS = frozenset(
    {
        "-n", "--namespace", "-f", "--values", "--set", "--set-string", "--set-file",
        "--set-json", "--version", "--kube-context", "--kubeconfig", "--timeout",
        "--repo", "--username", "--password", "-o", "--output", "--description",
        "--post-renderer", "--history-max", "--destination", "-d", "--revision",
        "--max", "--app-version", "--key", "--keyring", "--ca-file", "--cert-file",
        "--key-file", "-l", "--selector", "-p", "--starter", "--show-only", "-s",
        "--api-versions", "--kube-version", "--output-dir", "--name-template",
        "--registry-config", "--repository-config", "--repository-cache",
    }
)

KUBECTL_VALUE_FLAGS = frozenset(
    {
        "-n", "--namespace", "-f", "--filename", "-o", "--output", "-l", "--selector",
        "-c", "--container", "--context", "--kubeconfig", "--cluster", "--user",
        "--field-selector", "--since", "--tail", "--timeout", "--address", "-k",
        "--kustomize", "--for", "--replicas", "--image", "--type", "--port",
        "--sort-by", "--template", "--server", "-s", "--token", "--pod-running-timeout",
        "--dry-run", "--from-literal", "--from-file", "--docker-server",
        "--docker-username", "--docker-password", "--grace-period", "-p", "--patch",
        "--target-port", "--name", "--protocol", "--limits", "--requests", "--env",
        "--labels", "--restart",
    }
)

ARGOCD_VALUE_FLAGS = frozenset(
    {
        "--username", "--password", "--server", "--repo", "--path", "--dest-server",
        "--dest-namespace", "--dest-name", "--project", "--revision", "--sync-policy",
        "--values", "--helm-set", "--auth-token", "--grpc-web-root-path", "-o",
        "--output", "--name", "--type", "--timeout", "--sync-option", "-n", "--namespace",
        "--port-forward-namespace", "--app-namespace",
    }
)

HELM = Tool(
    name="helm",
    value_flags=HELM_VALUE_FLAGS,
    subcommands={
        "create": _sub("create", 1, 1),
        "install": _sub("install", 1, 2),
        "upgrade": _sub("upgrade", 2, 2),
        "rollback": _sub("rollback", 1, 2),
        "uninstall": _sub("uninstall", 1),
        "delete": _sub("delete", 1),
        "list": _sub("list", 0, 0),
        "ls": _sub("ls", 0, 0),
        "history": _sub("history", 1, 1),
        "status": _sub("status", 1, 1),
        "template": _sub("template", 1, 2),
        "lint": _sub("lint", 0),
        "package": _sub("package", 1),
        "pull": _sub("pull", 1, 1),
        "push": _sub("push", 2, 2),
        "test": _sub("test", 1, 1),
        "version": _sub("version", 0, 0),
        "env": _sub("env", 0, 1),
        "repo": _sub(
            "repo",
            add=_sub("add", 2, 2),
            update=_sub("update", 0),
            list=_sub("list", 0, 0),
            remove=_sub("remove", 1),
            index=_sub("index", 1, 1),
        ),
        "dependency": _sub(
            "dependency",
            update=_sub("update", 0, 1),
            build=_sub("build", 0, 1),
            list=_sub("list", 0, 1),
        ),
        "show": _sub(
            "show",
            all=_sub("all", 1, 1),
            chart=_sub("chart", 1, 1),
            values=_sub("values", 1, 1),
            readme=_sub("readme", 1, 1),
            crds=_sub("crds", 1, 1),
        ),
        "get": _sub(
            "get",
            all=_sub("all", 1, 1),
            values=_sub("values", 1, 1),
            manifest=_sub("manifest", 1, 1),
            notes=_sub("notes", 1, 1),
            hooks=_sub("hooks", 1, 1),
        ),
        "search": _sub(
            "search",
            repo=_sub("repo", 0, 1),
            hub=_sub("hub", 0, 1),
        ),
        "plugin": _sub(
            "plugin",
            install=_sub("install", 1, 1),
            list=_sub("list", 0, 0),
            uninstall=_sub("uninstall", 1),
        ),
    },
)

KUBECTL = Tool(
    name="kubectl",
    value_flags=KUBECTL_VALUE_FLAGS,
    subcommands={
        "apply": _sub("apply", 0, 0),
        "create": _sub("create", 0),
        "get": _sub("get", 0),
        "describe": _sub("describe", 1),
        "delete": _sub("delete", 0),
        "edit": _sub("edit", 1, 2),
        "logs": _sub(
            "logs", 1, 2, switch_flags=frozenset({"-f", "--follow", "-p", "--previous"}), selectable=True
        ),
        "exec": _sub("exec", 1),
        "patch": _sub("patch", 1, 2),
        "expose": _sub("expose", 1, 2),
        "run": _sub("run", 1),
        "top": _sub("top", 1, 2),
        "explain": _sub("explain", 1, 1),
        "cp": _sub("cp", 2, 2),
        "port-forward": _sub("port-forward", 2),
        "scale": _sub("scale", 1, 2),
        "label": _sub("label", 2),
        "annotate": _sub("annotate", 2),
        "wait": _sub("wait", 0),
        "version": _sub("version", 0, 0),
        "cluster-info": _sub("cluster-info", 0, 1),
        "rollout": _sub(
            "rollout",
            status=_sub("status", 1, 2),
            history=_sub("history", 1, 2),
            undo=_sub("undo", 1, 2),
            restart=_sub("restart", 1, 2),
        ),
        "config": _sub(
            "config",
            **{
                "current-context": _sub("current-context", 0, 0),
                "use-context": _sub("use-context", 1, 1),
                "get-contexts": _sub("get-contexts", 0, 1),
                "set-context": _sub("set-context", 0, 1),
                "view": _sub("view", 0, 0),
            },
        ),
    },
)

ARGOCD = Tool(
    name="argocd",
    value_flags=ARGOCD_VALUE_FLAGS,
    subcommands={
        "login": _sub("login", 1, 1),
        "logout": _sub("logout", 1, 1),
        "version": _sub("version", 0, 0),
        "admin": _sub(
            "admin",
            **{
                "initial-password": _sub("initial-password", 0, 0),
            },
        ),
        "app": _sub(
            "app",
            create=_sub("create", 1, 1),
            get=_sub("get", 1, 1),
            sync=_sub("sync", 1),
            list=_sub("list", 0, 0),
            delete=_sub("delete", 1),
            history=_sub("history", 1, 1),
            rollback=_sub("rollback", 1, 2),
            diff=_sub("diff", 1, 1),
            set=_sub("set", 1, 1),
            wait=_sub("wait", 1),
        ),
        "repo": _sub(
            "repo",
            add=_sub("add", 1, 1),
            list=_sub("list", 0, 0),
            rm=_sub("rm", 1),
        ),
        "cluster": _sub(
            "cluster",
            add=_sub("add", 1, 1),
            list=_sub("list", 0, 0),
            rm=_sub("rm", 1),
        ),
        "proj": _sub(
            "proj",
            create=_sub("create", 1, 1),
            list=_sub("list", 0, 0),
            get=_sub("get", 1, 1),
        ),
        "account": _sub(
            "account",
            **{
                "update-password": _sub("update-password", 0, 0),
                "list": _sub("list", 0, 0),
            },
        ),
    },
)

PASSTHROUGH_TOOLS = frozenset(
    {
        "git", "curl", "wget", "docker", "cd", "mkdir", "echo", "cat", "export",
        "brew", "choco", "sudo", "ls", "minikube", "kind", "k3d", "chmod", "tar",
        "mv", "cp", "rm", "open", "sh", "bash", "source", "vi", "vim", "nano",
        "code", "touch", "grep", "base64", "apt", "apt-get", "snap", "winget",
        "tree", "xdg-open", "watch", "yq", "jq", "python", "python3", "pip",
    }
)

TOOLS: dict[str, Tool] = {tool.name: tool for tool in (HELM, KUBECTL, ARGOCD)}


def get_tool(name: str, extra_tools: list[str] | None = None) -> Tool | None:
    """Look up a tool by command name.

    Args:
        name: Command name as typed
        extra_tools: Additional pass-through command names

    Returns:
        Tool, or None when the command is unknown
    """
    if name in TOOLS:
        return TOOLS[name]
    if name in PASSTHROUGH_TOOLS or (extra_tools and name in extra_tools):
        return Tool(name=name, passthrough=True)
    return None


def get_subcommand(tool: Tool, name: str) -> Subcommand | None:
    """Look up a top-level subcommand of a tool."""
    return tool.subcommands.get(name)


def is_known_command(name: str, extra_tools: list[str] | None = None) -> bool:
    """Return True for catalogued and pass-through commands."""
    return get_tool(name, extra_tools) is not None
