"""
Tests for YAML frontmatter handling and Claude field prefixing.

Run with: pytest tests/test_frontmatter.py -v
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from acsync.field_prefix import (
    CLAUDE_MODEL_INVOCATION_KEY,
    is_prefixed_key,
    prefix_claude_key,
    unprefix_claude_key,
)
from acsync.frontmatter import FrontmatterError, clean_fields, join_frontmatter, split_frontmatter
from acsync.semantic_ir import normalize_provenance


class TestSplitFrontmatter:
    """Test splitting YAML frontmatter from a Markdown body."""

    def test_document_without_frontmatter(self):
        assert split_frontmatter("Hello\n") == ({}, "Hello\n")

    def test_fields_and_content(self):
        data, content = split_frontmatter("---\ndescription: Review\nmodel: sonnet\n---\nBody $1\n")
        assert data == {"description": "Review", "model": "sonnet"}
        assert content == "Body $1\n"

    def test_empty_block(self):
        assert split_frontmatter("---\n---\nBody") == ({}, "Body")

    def test_crlf_line_endings(self):
        data, content = split_frontmatter("---\r\ndescription: x\r\n---\r\nBody")
        assert data == {"description": "x"}
        assert content == "Body"

    def test_invalid_yaml_raises(self):
        with pytest.raises(FrontmatterError):
            split_frontmatter("---\ndescription: [unclosed\n---\nBody")

    def test_non_mapping_raises(self):
        with pytest.raises(FrontmatterError):
            split_frontmatter("---\n- a\n- b\n---\nBody")

    def test_horizontal_rule_in_body_is_not_frontmatter(self):
        text = "Intro\n---\nmore\n"
        assert split_frontmatter(text) == ({}, text)


class TestJoinFrontmatter:
    """Test writing frontmatter back in front of a body."""

    def test_no_fields_returns_content_only(self):
        assert join_frontmatter({}, "Body") == "Body"
        assert join_frontmatter({"description": None}, "Body") == "Body"

    def test_keeps_key_order(self):
        text = join_frontmatter({"name": "x", "description": "y", "_from": ["a/b"]}, "Body")
        assert text == "---\nname: x\ndescription: y\n_from:\n- a/b\n---\nBody\n"

    def test_round_trip(self):
        original = "---\ndescription: Review\nmodel: sonnet\n---\nBody\n"
        data, content = split_frontmatter(original)
        assert join_frontmatter(data, content) == original

    def test_clean_fields_drops_none_only(self):
        assert clean_fields({"a": None, "b": False, "c": ""}) == {"b": False, "c": ""}


class TestClaudePrefix:
    """Test the reversible _claude_ key prefix."""

    def test_prefix(self):
        assert prefix_claude_key("allowed-tools") == "_claude_allowed_tools"
        assert prefix_claude_key("disable-model-invocation") == CLAUDE_MODEL_INVOCATION_KEY

    def test_unprefix_is_inverse(self):
        for key in ("allowed-tools", "argument-hint", "user-invocable", "model", "hooks"):
            assert unprefix_claude_key(prefix_claude_key(key)) == key

    def test_unprefix_leaves_other_keys(self):
        assert unprefix_claude_key("sandbox") == "sandbox"

    def test_is_prefixed_key(self):
        assert is_prefixed_key("_claude_model")
        assert not is_prefixed_key("model")


class TestProvenance:
    """Test normalization of the _from provenance list."""

    def test_string_becomes_list(self):
        assert normalize_provenance("owner/repo") == ["owner/repo"]

    def test_list_order_and_duplicates_kept(self):
        assert normalize_provenance(["a/b", "c/d", "a/b"]) == ["a/b", "c/d", "a/b"]

    @pytest.mark.parametrize("value", [None, "", [], 42])
    def test_empty_or_invalid_is_none(self, value):
        assert normalize_provenance(value) is None
