"""Unit tests for parameter repair."""

from toolrelay.tools.repair import (
    apply_parameter_mapping,
    build_repair_message,
    suggest_parameter_mapping,
)


def test_filepath_maps_to_path(make_tool):
    """Test the classic filepath -> path rename."""
    tool = make_tool("read_file", "path")

    assert suggest_parameter_mapping(tool, {"filepath": "notes.txt"}) == {
        "filepath": "path"
    }


def test_valid_keys_get_no_suggestion(make_tool):
    """Test that declared keys are left alone."""
    tool = make_tool("read_file", "path", "encoding")

    assert suggest_parameter_mapping(tool, {"path": "a", "encoding": "utf-8"}) == {}


def test_normalization_ignores_case_and_separators(make_tool):
    """Test that case, underscores and dashes are ignored."""
    tool = make_tool("write_file", "file_path", "content")

    mapping = suggest_parameter_mapping(tool, {"File-Path": "a", "CONTENT": "b"})

    assert mapping == {"File-Path": "file_path", "CONTENT": "content"}


def test_shorter_provided_key_matches_longer_declared(make_tool):
    """Test containment in both directions."""
    tool = make_tool("search", "search_query")

    assert suggest_parameter_mapping(tool, {"query": "x"}) == {"query": "search_query"}


def test_first_declared_match_wins(make_tool):
    """Test that declaration order decides between several matches."""
    tool = make_tool("copy", "source_path", "path")

    assert suggest_parameter_mapping(tool, {"filepath": "a"}) == {"filepath": "path"}
    assert suggest_parameter_mapping(tool, {"sourcepathname": "a"}) == {
        "sourcepathname": "source_path"
    }

    reordered = make_tool("copy", "path", "source_path")
    assert suggest_parameter_mapping(reordered, {"sourcepathname": "a"}) == {
        "sourcepathname": "path"
    }


def test_unmatched_keys_are_omitted(make_tool):
    """Test that keys with no similar declared key produce nothing."""
    tool = make_tool("read_file", "path")

    assert suggest_parameter_mapping(tool, {"mode": "r"}) == {}


def test_separator_only_key_is_ignored(make_tool):
    """Test that keys that normalize to nothing get no suggestion."""
    tool = make_tool("read_file", "path")

    assert suggest_parameter_mapping(tool, {"_": 1, "--": 2}) == {}


def test_suggestions_are_deterministic(make_tool):
    """Test that repeated calls give identical mappings."""
    tool = make_tool("edit", "file_path", "old_text", "new_text")
    provided = {"filepath": "a", "old": "b", "new": "c", "dry_run": True}

    first = suggest_parameter_mapping(tool, provided)
    for _ in range(20):
        assert suggest_parameter_mapping(tool, provided) == first
    assert first == {"filepath": "file_path", "old": "old_text", "new": "new_text"}


def test_apply_parameter_mapping():
    """Test that mapped keys are renamed and others kept."""
    args = {"filepath": "a.txt", "encoding": "utf-8"}

    fixed = apply_parameter_mapping(args, {"filepath": "path"})

    assert fixed == {"path": "a.txt", "encoding": "utf-8"}
    assert args == {"filepath": "a.txt", "encoding": "utf-8"}


def test_build_repair_message_lists_parameters(make_tool):
    """Test the diagnostic content."""
    tool = make_tool("read_file", "path", "encoding", required=["path"])

    message = build_repair_message(
        "read_file",
        "Error: path is required",
        tool,
        {"filepath": "a.txt"},
        {"filepath": "path"},
    )

    assert message.startswith("Error using tool read_file:\nError: path is required")
    assert "Required: path\n" in message
    assert "Available: path, encoding\n" in message
    assert "Provided: filepath\n" in message
    assert "- filepath -> path" in message


def test_build_repair_message_without_descriptor():
    """Test the diagnostic when the tool's schema is unknown."""
    message = build_repair_message("ghost", "Error: boom", None, {}, {})

    assert message == "Error using tool ghost:\nError: boom\n\n"
