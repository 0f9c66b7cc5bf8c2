import json

from todo_snipe.embedded.aggregator import aggregate
from todo_snipe.embedded.formatters import file_link, normalize_path, render_todos
from todo_snipe.embedded.models import Occurrence, RenderConfig
from todo_snipe.embedded.sweep import render_marker_block


def test_example_block():
    files = {
        "a.txt": ["", "", "", "TODO: buy milk"],
        "b.txt": ["FIXME: leak"],
    }
    block = render_marker_block(
        ["a.txt", "b.txt"],
        r"(TODO|FIXME):\s*(.*)",
        RenderConfig(indentation="\t", group_by_file=False, bullet_symbol="☐"),
        line_source=files.get,
    )

    assert block == (
        "FIXME:\n"
        "\t☐ FIXME: leak @file:///b.txt#1\n"
        "TODO:\n"
        "\t☐ TODO: buy milk @file:///a.txt#4\n"
    )


def test_group_by_file_doubles_indent():
    index = {"TODO": {"src/a.py": [Occurrence("    # TODO x", 0), Occurrence("# TODO y", 7)]}}
    block = render_todos(index, RenderConfig(indentation="  ", group_by_file=True))

    assert block == (
        "TODO:\n"
        "  @file:///src/a.py\n"
        "    ☐ # TODO x @file:///src/a.py#1\n"
        "    ☐ # TODO y @file:///src/a.py#8\n"
    )


def test_empty_index_renders_empty_string():
    assert render_todos({}, RenderConfig()) == ""


def test_no_matches_renders_empty_string():
    block = render_marker_block(
        ["a.txt"], r"(TODO):(.*)", RenderConfig(), line_source={"a.txt": ["clean"]}.get
    )
    assert block == ""


def test_render_ignores_insertion_order():
    first = {
        "TODO": {"b.txt": [Occurrence("TODO: 2", 1)], "a.txt": [Occurrence("TODO: 1", 0)]},
        "BUG": {"c.txt": [Occurrence("BUG: 3", 4)]},
    }
    second = {
        "BUG": {"c.txt": [Occurrence("BUG: 3", 4)]},
        "TODO": {"a.txt": [Occurrence("TODO: 1", 0)], "b.txt": [Occurrence("TODO: 2", 1)]},
    }
    config = RenderConfig()

    assert render_todos(first, config) == render_todos(second, config)
    assert render_todos(first, config) == render_todos(first, config)


def test_headers_and_files_sorted():
    index = {
        marker: {path: [Occurrence(f"{marker} here", 0)] for path in ("z/x", "a/y", "m")}
        for marker in ("TODO", "FIXME", "BUG", "NOTE")
    }
    block = render_todos(index, RenderConfig(group_by_file=True))
    lines = block.splitlines()

    headers = [line for line in lines if line.endswith(":") and not line.startswith(" ")]
    assert headers == ["BUG:", "FIXME:", "NOTE:", "TODO:"]

    groups = [line.strip() for line in lines if line.strip().startswith("@file://")]
    assert groups[:3] == ["@file:///a/y", "@file:///m", "@file:///z/x"]


def test_untrimmed_type_header_kept_verbatim():
    block = render_todos({" TODO": {"a": [Occurrence(" TODO x", 0)]}}, RenderConfig())
    assert block.startswith(" TODO:\n")


def test_line_text_left_trimmed_only():
    block = render_todos({"TODO": {"a": [Occurrence("\t  TODO: x  ", 2)]}}, RenderConfig())
    assert block == "TODO:\n  ☐ TODO: x   @file:///a#3\n"


def test_normalize_path():
    assert normalize_path("sub/dir//note.txt") == "/sub/dir//note.txt"
    assert normalize_path("///abs/file") == "/abs/file"
    assert normalize_path("/already") == "/already"


def test_file_link():
    assert file_link("a.txt") == "@file:///a.txt"
    assert file_link("a.txt", 0) == "@file:///a.txt#1"


def test_to_dict_is_json_ready_and_sorted():
    files = {"b.txt": ["TODO: two"], "a.txt": ["x", "TODO: one"]}
    result = aggregate(["b.txt", "a.txt"], r"(TODO):\s*(.*)", line_source=files.get)

    data = json.loads(json.dumps(result.to_dict()))

    assert data["total_occurrences"] == 2
    assert data["markers"][0]["type"] == "TODO"
    todo_files = data["markers"][0]["files"]
    assert [f["path"] for f in todo_files] == ["/a.txt", "/b.txt"]
    assert todo_files[0]["occurrences"] == [
        {"line": 2, "text": "TODO: one", "link": "@file:///a.txt#2"}
    ]


def test_scan_result_render_defaults():
    files = {"a.txt": ["TODO: x"]}
    result = aggregate(["a.txt"], r"(TODO):\s*(.*)", line_source=files.get)
    assert result.render() == "TODO:\n  ☐ TODO: x @file:///a.txt#1\n"
