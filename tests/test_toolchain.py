"""Tests for usingstats.toolchain."""

from __future__ import annotations

import threading

import pytest

from usingstats.errors import ExitCode, ToolchainNotFoundError
from usingstats.toolchain import locate_toolchain


def test_locate_toolchain_parses_csharp() -> None:
    toolchain = locate_toolchain()
    tree = toolchain.parse(b"using System;\n")
    assert tree.root_node.type == "compilation_unit"


def test_locate_toolchain_reports_missing_grammar() -> None:
    with pytest.raises(ToolchainNotFoundError) as excinfo:
        locate_toolchain("usingstats_missing_grammar")
    assert excinfo.value.exit_code == ExitCode.TOOLCHAIN_NOT_FOUND
    assert "usingstats_missing_grammar" in str(excinfo.value)


def test_locate_toolchain_rejects_module_without_language() -> None:
    with pytest.raises(ToolchainNotFoundError):
        locate_toolchain("json")


def test_each_thread_gets_its_own_parser() -> None:
    toolchain = locate_toolchain()
    parsers = []

    def _grab() -> None:
        parsers.append(toolchain._parser())

    threads = [threading.Thread(target=_grab) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert parsers[0] is not parsers[1]
    assert toolchain._parser() is toolchain._parser()
