"""Tests for gqlscan.scanner."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from gqlscan.scanner import FileScanner, group_files_by_pages_root, group_key

HOME_SOURCE = """
import { gql } from "@apollo/client";

export const HOME = gql`
  query GetHome { id }
`;
"""


def test_scanner_returns_only_marked_files(repo_builder) -> None:
    repo_builder.write(
        {
            "pages/home/Home.jsx": HOME_SOURCE,
            "pages/about/About.jsx": "export default () => <p>About</p>;\n",
            "pages/cart/cart.ts": "const q = graphql`query Cart { items }`;\n",
            "pages/cart/Cart.tsx": "export const Cart = () => null;\n",
            "lib/client.js": "const ping = gql`query Ping { ok }`;\n",
        }
    )

    found = repo_builder.scan()

    root = str(repo_builder.path())
    assert sorted(found) == sorted(
        [
            os.path.join(root, "pages", "home", "Home.jsx"),
            os.path.join(root, "pages", "cart", "cart.ts"),
            os.path.join(root, "lib", "client.js"),
        ]
    )


def test_scanner_ignores_unrecognised_extensions(repo_builder) -> None:
    repo_builder.write(
        {
            "pages/home/query.graphql": "gql`query GetHome { id }`\n",
            "pages/home/notes.md": "Use gql` for queries\n",
            "pages/home/Home.JSX": HOME_SOURCE,
        }
    )

    found = repo_builder.scan()

    assert [Path(path).name for path in found] == ["Home.JSX"]


def test_scanner_requires_backtick_marker(repo_builder) -> None:
    repo_builder.write(
        {
            "a.js": "import gql from 'graphql-tag';\n",
            "b.js": "const Q = gql`query B { id }`;\n",
        }
    )

    found = repo_builder.scan()

    assert [Path(path).name for path in found] == ["b.js"]


def test_scanner_does_not_prune_vendor_directories(repo_builder) -> None:
    repo_builder.write({"node_modules/lib/index.js": "gql`query Vendor { id }`\n"})

    found = repo_builder.scan()

    assert len(found) == 1


def test_scanner_uses_custom_markers_and_extensions(tmp_path: Path) -> None:
    (tmp_path / "page.vue").write_text("const q = useQuery(`query Vue { id }`)\n", encoding="utf-8")
    (tmp_path / "page.js").write_text("gql`query Js { id }`\n", encoding="utf-8")

    scanner = FileScanner(extensions=[".vue"], markers=["useQuery("])

    assert scanner.find_tagged_files(tmp_path) == [str(tmp_path / "page.vue")]


def test_scanner_keeps_relative_roots_relative(tmp_path: Path, monkeypatch) -> None:
    target = tmp_path / "src" / "pages" / "home"
    target.mkdir(parents=True)
    (target / "Home.tsx").write_text("gql`query GetHome { id }`\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    found = FileScanner().find_tagged_files("src")

    assert found == [os.path.join("src", "pages", "home", "Home.tsx")]


def test_scanner_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError) as excinfo:
        FileScanner().find_tagged_files(missing)

    assert str(missing) in str(excinfo.value)


def test_scanner_rejects_file_root(tmp_path: Path) -> None:
    file_root = tmp_path / "file.js"
    file_root.write_text("", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        FileScanner().find_tagged_files(file_root)


def test_scanner_requires_markers() -> None:
    with pytest.raises(ValueError):
        FileScanner(markers=[])


def test_home_scenario_groups_marked_file_only(repo_builder) -> None:
    repo_builder.write(
        {
            "pages/home/Home.jsx": HOME_SOURCE,
            "pages/about/About.jsx": "export default () => null;\n",
        }
    )
    pages_root = repo_builder.path("pages")

    groups = group_files_by_pages_root(FileScanner().find_tagged_files(pages_root), pages_root)

    assert list(groups) == ["home"]
    assert len(groups["home"]) == 1
    assert groups["home"][0].endswith(os.path.join("home", "Home.jsx"))


def test_grouping_preserves_encounter_order() -> None:
    root = os.path.join("src", "pages")
    files = [
        os.path.join(root, "b", "One.jsx"),
        os.path.join(root, "a", "Two.jsx"),
        os.path.join(root, "b", "nested", "Three.jsx"),
        os.path.join(root, "Index.jsx"),
    ]

    groups = group_files_by_pages_root(files, root)

    assert list(groups) == ["b", "a", "Index.jsx"]
    assert groups["b"] == [files[0], files[2]]
    assert groups["a"] == [files[1]]


def test_grouping_keeps_files_outside_pages_root() -> None:
    root = os.path.join("src", "pages")
    outside = os.path.join("src", "lib", "client.js")

    groups = group_files_by_pages_root([outside], root)

    assert groups == {"..": [outside]}


def test_grouping_is_stable_when_rederived() -> None:
    root = os.path.join("web", "pages")
    files = [
        os.path.join(root, "home", "Home.jsx"),
        os.path.join(root, "home", "parts", "Hero.jsx"),
        os.path.join(root, "account", "Account.tsx"),
        os.path.join("web", "shared", "api.ts"),
    ]

    groups = group_files_by_pages_root(files, root)
    projected = [path for members in groups.values() for path in members]
    regrouped = group_files_by_pages_root(projected, root)

    assert regrouped == groups
    for key, members in groups.items():
        assert all(group_key(path, root) == key for path in members)
