"""Tests for layered YAML documents."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
import yaml
from structural_merge import DocumentError
from structural_merge import DocumentLayers
from structural_merge import load_document
from structural_merge import merge_documents
from structural_merge import update_document
from structural_merge import write_document


@pytest.fixture
def tmp_root():
    """Create a temporary directory for documents."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestDocumentIO:
    """Test reading and writing single documents."""

    def test_load_missing_returns_none(self, tmp_root):
        """Test loading a missing document returns None."""
        assert load_document(tmp_root / "missing.yaml") is None

    def test_load_empty_returns_empty_dict(self, tmp_root):
        """Test an empty file loads as an empty mapping."""
        path = tmp_root / "empty.yaml"
        path.write_text("")
        assert load_document(path) == {}

    def test_load_invalid_yaml_raises(self, tmp_root):
        """Test malformed YAML raises DocumentError."""
        path = tmp_root / "bad.yaml"
        path.write_text("key: [unclosed\n")
        with pytest.raises(DocumentError, match="Failed to read"):
            load_document(path)

    def test_load_non_mapping_raises(self, tmp_root):
        """Test a top-level list is rejected."""
        path = tmp_root / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(DocumentError, match="must contain a mapping"):
            load_document(path)

    def test_write_creates_parent_dirs(self, tmp_root):
        """Test writing creates missing directories."""
        path = tmp_root / "nested" / "dir" / "settings.yaml"
        write_document(path, {"a": 1})
        assert path.exists()
        assert yaml.safe_load(path.read_text()) == {"a": 1}

    def test_write_preserves_key_order(self, tmp_root):
        """Test keys are written in insertion order."""
        path = tmp_root / "ordered.yaml"
        write_document(path, {"zeta": 1, "alpha": 2})
        assert path.read_text().splitlines() == ["zeta: 1", "alpha: 2"]


class TestMergeDocuments:
    """Test merging several documents by precedence."""

    def test_no_documents(self, tmp_root):
        """Test merging only missing documents yields an empty mapping."""
        assert merge_documents(tmp_root / "a.yaml", None) == {}

    def test_later_documents_win(self, tmp_root):
        """Test later documents override earlier ones, deeply."""
        base = tmp_root / "base.yaml"
        override = tmp_root / "override.yaml"
        write_document(base, {"database": {"host": "db", "port": 5432}, "tags": ["a", "b"]})
        write_document(override, {"database": {"host": "prod-db"}, "tags": ["c"]})

        assert merge_documents(base, override) == {
            "database": {"host": "prod-db", "port": 5432},
            "tags": ["c", "b"],
        }

    def test_missing_documents_skipped(self, tmp_root):
        """Test missing layers between existing ones are ignored."""
        base = tmp_root / "base.yaml"
        write_document(base, {"a": 1})
        assert merge_documents(base, tmp_root / "missing.yaml") == {"a": 1}

    def test_null_values_do_not_clobber(self, tmp_root):
        """Test an explicit null in a later document keeps the earlier value."""
        base = tmp_root / "base.yaml"
        override = tmp_root / "override.yaml"
        write_document(base, {"a": 1})
        override.write_text("a: null\nb: null\n")
        assert merge_documents(base, override) == {"a": 1, "b": None}


class TestUpdateDocument:
    """Test in-place document updates."""

    def test_update_creates_document(self, tmp_root):
        """Test updating a missing document creates it."""
        path = tmp_root / "settings.yaml"
        assert update_document(path, {"profile": {"active": "dev"}}) == {"profile": {"active": "dev"}}
        assert load_document(path) == {"profile": {"active": "dev"}}

    def test_update_merges_existing(self, tmp_root):
        """Test updates deep merge with the existing content."""
        path = tmp_root / "settings.yaml"
        write_document(path, {"profile": {"active": "dev", "default": "base"}})
        update_document(path, {"profile": {"active": "test"}})
        assert load_document(path) == {"profile": {"active": "test", "default": "base"}}


class TestDocumentLayers:
    """Test layered documents in a realistic user/project/local setup."""

    @pytest.fixture
    def layers(self, tmp_root):
        """Create user, project and local layers."""
        return DocumentLayers(
            (
                tmp_root / "user" / "settings.yaml",
                tmp_root / "project" / "settings.yaml",
                tmp_root / "project" / "settings.local.yaml",
            )
        )

    def test_empty_layers(self, layers):
        """Test no documents merge to an empty mapping."""
        assert layers.merged() == {}

    def test_layer_precedence(self, layers):
        """Test local > project > user, with nested keys combined."""
        layers.update(0, {"sources": {"provider-a": "user-source"}, "profile": {"active": "foundation"}})
        layers.update(1, {"sources": {"provider-b": "project-source"}})
        layers.update(2, {"profile": {"active": "dev"}, "sources": {"provider-a": "local-source"}})

        assert layers.merged() == {
            "sources": {"provider-a": "local-source", "provider-b": "project-source"},
            "profile": {"active": "dev"},
        }

    def test_disabled_layer(self, tmp_root):
        """Test updating a layer without a path raises DocumentError."""
        layers = DocumentLayers((tmp_root / "user.yaml", None))
        assert layers.merged() == {}
        with pytest.raises(DocumentError, match="no document path"):
            layers.update(1, {"a": 1})
