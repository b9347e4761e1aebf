from __future__ import annotations

from pathlib import Path

import pytest

from j_dep_fixtures.config import FixtureConfig
from j_dep_fixtures.exceptions import (
    FormatError,
    ResourceNotFoundError,
    SubstitutionError,
    UnresolvedReferenceError,
)
from j_dep_fixtures.models import DependencyNode
from j_dep_fixtures.parser import DependencyGraphParser

PREFIX = "org/example/fixtures/"


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def _assert_node(node: DependencyNode, suffix: str) -> None:
    dependency = node.dependency
    if dependency.scope:
        assert dependency.scope == f"scope{suffix}"
    artifact = dependency.artifact
    assert artifact.group_id == f"gid{suffix}"
    assert artifact.artifact_id == f"aid{suffix}"
    assert artifact.extension == f"ext{suffix}"
    assert artifact.version == f"ver{suffix}"


@pytest.fixture
def parser(data_config: FixtureConfig) -> DependencyGraphParser:
    return DependencyGraphParser(config=data_config)


def test_only_root(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal("gid:aid:1:jar:scope")

    assert node.children == []
    assert node.dependency.scope == "scope"
    artifact = node.dependency.artifact
    assert artifact.group_id == "gid"
    assert artifact.artifact_id == "aid"
    assert artifact.extension == "jar"
    assert artifact.version == "1"


def test_scope_defaults_to_empty(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal("gid:aid:1:jar")
    assert node.children == []
    assert node.dependency.scope == ""
    assert node.dependency.optional is False


def test_with_children(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal(
        "gid1:aid1:ver1:ext1:scope1\n"
        "+- gid2:aid2:ver2:ext2:scope2\n"
        "\\- gid3:aid3:ver3:ext3:scope3\n"
    )
    _assert_node(node, "1")
    assert len(node.children) == 2
    _assert_node(node.children[0], "2")
    _assert_node(node.children[1], "3")


def test_deep_children(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal(
        "gid1:aid1:ver1:ext1\n"
        "+- gid2:aid2:ver2:ext2:scope2\n"
        "|  \\- gid3:aid3:ver3:ext3\n"
        "\\- gid4:aid4:ver4:ext4:scope4"
    )
    _assert_node(node, "1")
    assert len(node.children) == 2

    level1 = node.children[0]
    _assert_node(level1, "2")
    assert len(level1.children) == 1
    _assert_node(level1.children[0], "3")
    assert level1.children[0].children == []

    _assert_node(node.children[1], "4")
    assert node.children[1].children == []


def test_children_of_last_sibling(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal(
        "gid1:aid1:ver1:ext1\n"
        "\\- gid2:aid2:ver2:ext2\n"
        "   +- gid3:aid3:ver3:ext3\n"
        "   \\- gid4:aid4:ver4:ext4\n"
    )
    assert len(node.children) == 1
    assert [c.artifact.artifact_id for c in node.children[0].children] == ["aid3", "aid4"]


def test_shallower_line_closes_deeper_subtrees(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal(
        "gid1:aid1:ver1:ext1\n"
        "+- gid2:aid2:ver2:ext2\n"
        "|  \\- gid3:aid3:ver3:ext3\n"
        "|     \\- gid4:aid4:ver4:ext4\n"
        "\\- gid5:aid5:ver5:ext5\n"
    )
    assert [c.artifact.artifact_id for c in node.children] == ["aid2", "aid5"]
    assert node.children[1].children == []
    assert node.children[0].children[0].children[0].artifact.artifact_id == "aid4"


def test_comments(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal("# first line\n#second line\ngid:aid:ver:ext # root artifact asdf:qwer:zcxv:uip")
    _assert_node(node, "")
    assert node.children == []


def test_id_self_reference(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal("(id)gid:aid:ver:ext\n\\- ^id")
    _assert_node(node, "")
    assert len(node.children) == 1
    assert node.children[0] is node


def test_back_reference_to_ancestor_builds_cycle(parser: DependencyGraphParser) -> None:
    graph = parser.parse_graph_literal(
        "(top)gid:top:1:jar\n"
        "\\- gid:middle:1:jar\n"
        "   \\- ^top\n"
    )
    root = graph.root
    middle = root.children[0]
    assert middle.children[0] is root
    # Back-references do not allocate nodes.
    assert len(graph) == 2


def test_properties(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal("gid:aid:ver:ext;test=foo;test2=fizzle")
    _assert_node(node, "")
    assert node.dependency.artifact.properties == {"test": "foo", "test2": "fizzle"}


def test_optional_flag(parser: DependencyGraphParser) -> None:
    node = parser.parse_literal("gid:aid:ver:ext:test:optional")
    assert node.dependency.scope == "test"
    assert node.dependency.optional is True


def test_substitutions() -> None:
    parser = DependencyGraphParser(substitutions=["subst1", "subst2"])

    artifact = parser.parse_literal("%s:%s:ver:ext").dependency.artifact
    assert artifact.group_id == "subst1"
    assert artifact.artifact_id == "subst2"

    root = parser.parse_literal("%s:aid:ver:ext\n\\- %s:aid:ver:ext")
    assert root.dependency.artifact.group_id == "subst1"
    assert root.children[0].dependency.artifact.group_id == "subst2"


def test_substitution_of_tags_and_references() -> None:
    parser = DependencyGraphParser().with_substitutions(["x", "x"])
    root = parser.parse_literal("(%s)gid:aid:ver:ext\n\\- ^%s")
    assert root.children[0] is root


def test_substitution_skips_comments() -> None:
    parser = DependencyGraphParser(substitutions=["g"])
    root = parser.parse_literal("# %s is a placeholder\n%s:aid:ver:ext")
    assert root.dependency.artifact.group_id == "g"


def test_with_substitutions_leaves_original_untouched() -> None:
    parser = DependencyGraphParser(substitutions=["a"])
    other = parser.with_substitutions(["b", "c"])
    assert parser.substitutions == ("a",)
    assert other.substitutions == ("b", "c")


def test_substitution_list_exhausted() -> None:
    parser = DependencyGraphParser(substitutions=["only"])
    with pytest.raises(SubstitutionError):
        parser.parse_literal("%s:%s:ver:ext")


def test_unresolved_reference() -> None:
    with pytest.raises(UnresolvedReferenceError) as excinfo:
        DependencyGraphParser().parse_literal("gid:aid:ver:ext\n\\- ^missing")
    assert excinfo.value.tag == "missing"


def test_forward_reference_is_unresolved() -> None:
    with pytest.raises(UnresolvedReferenceError):
        DependencyGraphParser().parse_literal("gid:aid:ver:ext\n+- ^later\n\\- (later)gid:b:ver:ext")


def test_too_few_fields() -> None:
    with pytest.raises(FormatError) as excinfo:
        DependencyGraphParser().parse_literal("gid:aid:ver")
    assert excinfo.value.line_number == 1


def test_empty_definition() -> None:
    with pytest.raises(FormatError):
        DependencyGraphParser().parse_literal("# nothing here\n\n")


def test_parse_only_reads_first_graph() -> None:
    node = DependencyGraphParser().parse_literal("gid:aid:ver:ext\n\ngid:aid2:ver:ext\n+- broken")
    assert node.dependency.artifact.artifact_id == "aid"


def test_parse_multiple_literal() -> None:
    roots = DependencyGraphParser().parse_multiple_literal(
        "(a)gid:aid:ver:ext\n\\- ^a\n\n\n# separator comment\n\n(a)gid:aid2:ver:ext\n\\- gid:aid3:ver:ext\n"
    )
    assert len(roots) == 2
    assert roots[0].children[0] is roots[0]
    assert roots[1].artifact.artifact_id == "aid2"
    assert roots[1].children[0].artifact.artifact_id == "aid3"


def test_parse_multiple_tags_do_not_leak() -> None:
    with pytest.raises(UnresolvedReferenceError):
        DependencyGraphParser().parse_multiple_literal("(a)gid:aid:ver:ext\n\ngid:aid2:ver:ext\n\\- ^a")


def test_parse_multiple_restarts_substitutions() -> None:
    roots = DependencyGraphParser(substitutions=["s"]).parse_multiple_literal(
        "%s:aid:ver:ext\n\n%s:aid2:ver:ext"
    )
    assert [r.artifact.group_id for r in roots] == ["s", "s"]


def test_resource_loading(parser: DependencyGraphParser) -> None:
    node = parser.parse(PREFIX + "resource-loading.txt")
    _assert_node(node, "")
    assert node.children == [node]


def test_resource_loading_with_prefix(data_config: FixtureConfig) -> None:
    parser = DependencyGraphParser(PREFIX, config=data_config)
    assert parser.prefix == PREFIX
    node = parser.parse("resource-loading.txt")
    _assert_node(node, "")


def test_resource_loading_from_env() -> None:
    node = DependencyGraphParser(PREFIX).parse("resource-loading.txt")
    _assert_node(node, "")


def test_multiple(parser: DependencyGraphParser) -> None:
    nodes = parser.parse_multiple(PREFIX + "resource-loading.txt")
    assert len(nodes) == 2
    assert nodes[0].dependency.artifact.artifact_id == "aid"
    assert nodes[1].dependency.artifact.artifact_id == "aid2"
    assert nodes[1].children == []


def test_missing_resource(parser: DependencyGraphParser) -> None:
    with pytest.raises(ResourceNotFoundError):
        parser.parse("does/not/exist.txt")


def test_parse_url_and_path(tmp_path: Path) -> None:
    path = _write(tmp_path, "graph.txt", "gid:aid:ver:ext\n\\- gid:child:ver:ext\n")
    parser = DependencyGraphParser()

    from_path = parser.parse_url(path)
    from_url = parser.parse_url(path.as_uri())

    assert from_path.children[0].artifact.artifact_id == "child"
    assert from_url.children[0].artifact.artifact_id == "child"
    assert len(parser.parse_multiple_url(path)) == 1
