"""Tests for ipcgen.pipeline."""

from __future__ import annotations

import logging

import pytest

from ipcgen.config import IpcgenConfig
from ipcgen.errors import ConfigError, DuplicateMethodError
from ipcgen.models import PassState, SkipReason
from ipcgen.pipeline import Generator, format_duration
from tests._fixtures.source_builder import SourceTreeBuilder, api_class


def test_methods_from_two_files_merge_into_one_group(source_tree) -> None:
    source_tree.write(
        {
            "users/list.ts": api_class("Users", "UserList", "list()"),
            "users/get.ts": api_class("Users", "UserGet", "get(id: string)"),
        }
    )

    result = Generator(source_tree.config()).run()

    output = source_tree.read_output()
    assert output.count("  Users: {\n") == 1
    assert 'ipcRenderer.invoke("Users-list", );' in output
    assert 'ipcRenderer.invoke("Users-get", id);' in output
    assert "    get: async (id: string) => {\n" in output
    assert result.groups == 1
    assert result.methods == 2
    assert result.files_matched == 2


def test_duplicate_across_files_fails_and_names_both_types(source_tree) -> None:
    source_tree.write(
        {
            "a.ts": api_class("Users", "UserService", "get(id: string)"),
            "b.ts": api_class("Users", "LegacyUsers", "get(name: string)"),
        }
    )
    generator = Generator(source_tree.config())

    with pytest.raises(DuplicateMethodError) as excinfo:
        generator.run()

    message = str(excinfo.value)
    assert "'get'" in message and "'Users'" in message
    assert "- UserService" in message
    assert "- LegacyUsers" in message
    assert generator.state is PassState.FAILED
    assert not source_tree.output.exists()


def test_duplicate_within_one_class_fails(source_tree) -> None:
    source_tree.write({"api.ts": api_class("Users", "UserService", "get()", "get(id: string)")})

    with pytest.raises(DuplicateMethodError) as excinfo:
        Generator(source_tree.config()).run()

    assert excinfo.value.group == "Users"
    assert excinfo.value.method == "get"
    assert excinfo.value.sources == ["UserService", "UserService"]
    assert not source_tree.output.exists()


def test_failed_pass_leaves_previous_output_untouched(source_tree) -> None:
    source_tree.write({"a.ts": api_class("Users", "UserService", "get(id: string)")})
    generator = Generator(source_tree.config())
    generator.run()
    previous = source_tree.read_output()

    source_tree.write({"b.ts": api_class("Users", "Other", "get()")})
    with pytest.raises(DuplicateMethodError):
        generator.run()

    assert source_tree.read_output() == previous


def test_rerun_on_unchanged_tree_is_byte_identical(source_tree) -> None:
    source_tree.write(
        {
            "a.ts": api_class("Users", "UserService", "get(id: string)", "list()"),
            "nested/deeper/b.ts": api_class("Files", "FileService", "read(path: string, enc: string)"),
        }
    )
    generator = Generator(source_tree.config())

    generator.run()
    first = source_tree.output.read_bytes()
    generator.run()

    assert source_tree.output.read_bytes() == first


def test_output_is_independent_of_file_names(tmp_path) -> None:
    contents = [
        api_class("Users", "UserService", "get(id: string)"),
        api_class("Files", "FileService", "read(path: string)"),
        api_class("Users", "UserAdmin", "ban(id: string, reason: string)"),
    ]
    outputs = []
    for index, names in enumerate((["a.ts", "b.ts", "c.ts"], ["z.ts", "y/x.ts", "m.ts"])):
        tree = SourceTreeBuilder(tmp_path / f"tree{index}")
        tree.write(dict(zip(names, contents)))
        Generator(tree.config()).run()
        outputs.append(tree.read_output())

    assert outputs[0] == outputs[1]


def test_files_without_annotations_are_skipped(source_tree) -> None:
    source_tree.write(
        {
            "plain.ts": "export class Helper {\n  @route()\n  async hidden() {}\n}\n",
            "orphan.ts": '@backendAPI("Orphans")\n@route()\nasync lost() {}\n',
            "api.ts": api_class("Users", "UserService", "list()"),
        }
    )

    result = Generator(source_tree.config()).run()

    assert result.files_scanned == 3
    assert result.files_matched == 1
    assert sorted(reason for _path, reason in result.skipped) == sorted(
        [SkipReason.NO_GROUP_MARKER, SkipReason.NO_TYPE_DECLARATION]
    )
    output = source_tree.read_output()
    assert "hidden" not in output
    assert "Orphans" not in output


def test_only_configured_extensions_are_scanned(source_tree) -> None:
    source_tree.write(
        {
            "api.ts": api_class("Users", "UserService", "list()"),
            "api.js": api_class("Users", "Compiled", "list()"),
            "notes.txt": api_class("Notes", "NoteService", "read()"),
        }
    )

    result = Generator(source_tree.config()).run()

    assert result.files_scanned == 1
    assert "Notes" not in source_tree.read_output()


def test_exclude_paths_skip_matching_files(source_tree) -> None:
    source_tree.write(
        {
            "api.ts": api_class("Users", "UserService", "list()"),
            "node_modules/pkg/index.ts": api_class("Users", "Vendored", "list()"),
            "types.d.ts": api_class("Types", "Decl", "shape()"),
        }
    )

    config = source_tree.config(exclude_paths=["node_modules/", "*.d.ts"])
    result = Generator(config).run()

    assert result.files_scanned == 1
    assert "Types" not in source_tree.read_output()


def test_malformed_parameters_are_dropped_from_output(source_tree) -> None:
    source_tree.write({"api.ts": api_class("Users", "UserService", "find(query, limit: number)")})

    Generator(source_tree.config()).run()

    output = source_tree.read_output()
    assert "    find: async (limit: number) => {\n" in output
    assert 'ipcRenderer.invoke("Users-find", limit);' in output


def test_missing_input_directory_raises(tmp_path) -> None:
    config = IpcgenConfig(input=tmp_path / "missing", output=tmp_path / "api.ts")

    with pytest.raises(FileNotFoundError):
        Generator(config).run()


def test_generator_requires_input() -> None:
    with pytest.raises(ConfigError):
        Generator(IpcgenConfig())


def test_run_logs_duration(source_tree, caplog, monkeypatch) -> None:
    source_tree.write({"api.ts": api_class("Users", "UserService", "list()")})
    caplog.set_level(logging.INFO, logger="ipcgen")
    monkeypatch.setattr(logging.getLogger("ipcgen"), "propagate", True)

    Generator(source_tree.config()).run()

    assert any(record.getMessage().startswith("Finished in ") for record in caplog.records)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0.0042, "4 ms"), (0.999, "999 ms"), (1.0, "1 seconds"), (12.7, "12 seconds")],
)
def test_format_duration(seconds: float, expected: str) -> None:
    assert format_duration(seconds) == expected
