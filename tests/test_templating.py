"""Tests for Helm placeholder neutralisation."""

import yaml

from chartdoc.templating import PLACEHOLDER, has_actions, lookup_value, merge_values, neutralize


class TestNeutralize:
    """Test template actions are neutralised into parseable YAML."""

    def test_inline_actions_become_placeholders(self):
        """Inline actions are replaced by a plain scalar."""
        result = neutralize("replicas: {{ .Values.replicaCount }}\nname: {{ .Release.Name }}-svc\n")
        data = yaml.safe_load(result.text)
        assert data == {"replicas": PLACEHOLDER, "name": f"{PLACEHOLDER}-svc"}
        assert result.findings == []

    def test_action_only_lines_are_blanked(self):
        """Control actions on their own line disappear, keeping line count."""
        content = "metadata:\n  labels:\n    {{- include \"x.labels\" . | nindent 4 }}\n{{- if .Values.enabled }}\nkind: Service\n{{- end }}\n"
        result = neutralize(content)
        assert result.text.count("\n") == content.count("\n")
        assert yaml.safe_load(result.text) == {"metadata": {"labels": None}, "kind": "Service"}

    def test_quoted_image_reference(self):
        """Actions inside quoted strings keep the string valid."""
        result = neutralize('image: "{{ .Values.image.repository }}:{{ .Values.image.tag }}"\n')
        assert yaml.safe_load(result.text) == {"image": f"{PLACEHOLDER}:{PLACEHOLDER}"}

    def test_multiline_comment_preserves_lines(self):
        """A comment spanning lines is removed without shifting later lines."""
        content = "{{/*\nhelper docs\n*/}}\nkind: Service\n"
        result = neutralize(content)
        assert result.text.split("\n")[3] == "kind: Service"

    def test_collects_values_references(self):
        """.Values paths and their lines are collected, including $.Values."""
        content = "a: {{ .Values.image.tag }}\nb: {{ $.Values.service.port | quote }}\nc: {{ .Chart.Name }}\n"
        result = neutralize(content)
        assert [(r.path, r.line) for r in result.references] == [("image.tag", 1), ("service.port", 2)]

    def test_unclosed_action(self):
        """An action without its closing braces is reported."""
        result = neutralize("a: {{ .Values.x }\nb: 1\n")
        assert [f.code for f in result.findings] == ["UNBALANCED_TEMPLATE"]
        assert result.findings[0].line == 1

    def test_unclosed_action_before_another(self):
        """A missing '}}' is detected when another action follows."""
        result = neutralize("a: {{ .Values.x }\nb: {{ .Values.y }}\n")
        assert result.findings[0].code == "UNBALANCED_TEMPLATE"
        assert result.findings[0].line == 1

    def test_stray_closing_braces(self):
        """Closing braces without an opening action are reported."""
        result = neutralize("a: 1\nb: .Values.x }}\n")
        assert result.findings[0].line == 2

    def test_has_actions(self):
        assert has_actions("a: {{ .Values.x }}")
        assert not has_actions("a: b")


class TestValues:
    """Test values lookups."""

    def test_lookup_value(self):
        """Dotted paths resolve through nested mappings."""
        values = {"image": {"tag": "1.0"}, "resources": {}}
        assert lookup_value(values, "image.tag")
        assert lookup_value(values, "resources")
        assert not lookup_value(values, "image.digest")
        assert not lookup_value(values, "image.tag.major")

    def test_merge_values(self):
        """Nested mappings are merged, later values win."""
        merged = merge_values({"image": {"tag": "1", "repo": "a"}}, {"image": {"tag": "2"}, "x": 1})
        assert merged == {"image": {"tag": "2", "repo": "a"}, "x": 1}
