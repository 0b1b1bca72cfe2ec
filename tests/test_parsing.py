"""Tests for secrets/parsing.py module."""

import pytest

from kubeseal_provider.exceptions import SecretParsingError
from kubeseal_provider.secrets.parsing import load_secret_spec, write_manifest


def _write(tmp_path, content: str) -> str:
    path = tmp_path / "secret.yaml"
    path.write_text(content)
    return str(path)


class TestLoadSecretSpec:
    """Tests for reading secret declarations."""

    def test_load_full_declaration(self, tmp_path, sample_spec_yaml):
        """Test that every declared field is read."""
        spec = load_secret_spec(_write(tmp_path, sample_spec_yaml))

        assert spec.name == "db-credentials"
        assert spec.namespace == "default"
        assert spec.secret_type == "Opaque"
        assert dict(spec.labels) == {"app": "db"}
        assert dict(spec.annotations) == {"owner": "platform"}
        assert dict(spec.data) == {"username": b"admin", "password": b"s3cr3t"}

    def test_custom_type(self, tmp_path):
        """Test that the type field is honoured."""
        spec = load_secret_spec(_write(tmp_path, "name: tls\ntype: kubernetes.io/tls\ndata:\n  tls.crt: abc\n"))
        assert spec.secret_type == "kubernetes.io/tls"

    def test_empty_data_allowed(self, tmp_path):
        """Test that an explicitly empty data mapping is accepted."""
        spec = load_secret_spec(_write(tmp_path, "name: empty\ndata: {}\n"))

        assert dict(spec.data) == {}
        assert spec.namespace == ""

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises SecretParsingError."""
        with pytest.raises(SecretParsingError, match="does not exist"):
            load_secret_spec(str(tmp_path / "absent.yaml"))

    def test_empty_file(self, tmp_path):
        """Test that an empty file is rejected."""
        with pytest.raises(SecretParsingError, match="is empty"):
            load_secret_spec(_write(tmp_path, ""))

    def test_malformed_yaml(self, tmp_path):
        """Test that malformed YAML is rejected."""
        with pytest.raises(SecretParsingError, match="malformed YAML"):
            load_secret_spec(_write(tmp_path, "name: [unclosed\n"))

    def test_multiple_documents(self, tmp_path):
        """Test that multi-document files are rejected."""
        with pytest.raises(SecretParsingError, match="multiple YAML documents"):
            load_secret_spec(_write(tmp_path, "name: a\ndata: {}\n---\nname: b\ndata: {}\n"))

    def test_not_a_mapping(self, tmp_path):
        """Test that a top-level list is rejected."""
        with pytest.raises(SecretParsingError, match="valid YAML mapping"):
            load_secret_spec(_write(tmp_path, "- name: a\n"))

    def test_unknown_field(self, tmp_path):
        """Test that unknown keys are reported."""
        with pytest.raises(SecretParsingError, match="stringData"):
            load_secret_spec(_write(tmp_path, "name: a\ndata: {}\nstringData: {}\n"))

    def test_missing_name(self, tmp_path):
        """Test that a declaration without a name is rejected."""
        with pytest.raises(SecretParsingError, match="name"):
            load_secret_spec(_write(tmp_path, "data:\n  k: v\n"))

    def test_missing_data(self, tmp_path):
        """Test that a declaration without data is rejected."""
        with pytest.raises(SecretParsingError, match="'data'"):
            load_secret_spec(_write(tmp_path, "name: a\n"))

    def test_invalid_name(self, tmp_path):
        """Test that a name that is not a DNS subdomain is rejected."""
        with pytest.raises(SecretParsingError, match="Invalid name 'DB_Credentials'"):
            load_secret_spec(_write(tmp_path, "name: DB_Credentials\ndata: {}\n"))

    def test_invalid_namespace(self, tmp_path):
        """Test that an invalid namespace is rejected."""
        with pytest.raises(SecretParsingError, match="Invalid namespace"):
            load_secret_spec(_write(tmp_path, "name: app\nnamespace: -prod\ndata: {}\n"))

    def test_non_string_value(self, tmp_path):
        """Test that unquoted non-string values are rejected."""
        with pytest.raises(SecretParsingError, match="data.enabled"):
            load_secret_spec(_write(tmp_path, "name: a\ndata:\n  enabled: true\n"))

    def test_non_mapping_labels(self, tmp_path):
        """Test that labels must be a mapping."""
        with pytest.raises(SecretParsingError, match="'labels'"):
            load_secret_spec(_write(tmp_path, "name: a\nlabels: [x]\ndata: {}\n"))


class TestWriteManifest:
    """Tests for writing sealed manifests."""

    def test_write_manifest(self, tmp_path):
        """Test that the manifest is written verbatim."""
        output = tmp_path / "sealed.json"

        write_manifest(str(output), '{"kind": "SealedSecret"}\n')

        assert output.read_text() == '{"kind": "SealedSecret"}\n'

    def test_overwrites_existing(self, tmp_path):
        """Test that an existing file is replaced."""
        output = tmp_path / "sealed.json"
        output.write_text("old")

        write_manifest(str(output), "new")

        assert output.read_text() == "new"
