"""Tests for usingstats.workspace.project."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from tests._fixtures.solution_builder import SolutionBuilder
from usingstats.workspace.project import ProjectEvaluationError, evaluate_project


def _names(paths) -> List[str]:  # type: ignore[no-untyped-def]
    return [Path(path).name for path in paths]


def test_sdk_project_globs_sources_and_skips_build_output(
    solution_builder: SolutionBuilder,
) -> None:
    project_path = solution_builder.project(
        "src/App/App.csproj",
        {
            "Program.cs": "using System;\n",
            "Services/Worker.cs": "using System.Threading;\n",
            "obj/Debug/net8.0/App.GlobalUsings.g.cs": "global using System;\n",
            "bin/Debug/Leftover.cs": "using Nope;\n",
            ".hidden/Secret.cs": "using Nope;\n",
            "notes.txt": "not code",
        },
    )

    project = evaluate_project(project_path)

    assert project.name == "App"
    assert project.language == "C#"
    assert _names(document.path for document in project.documents) == [
        "Program.cs",
        "Worker.cs",
    ]
    assert all(document.project == "App" for document in project.documents)


def test_sdk_project_keeps_nested_folders_named_like_build_output(
    solution_builder: SolutionBuilder,
) -> None:
    project_path = solution_builder.project(
        "App/App.csproj",
        {
            "A.cs": "using System;\n",
            "Features/Bin/Thing.cs": "using Nested.Bin;\n",
            "Data/obj/Model.cs": "using Nested.Obj;\n",
            "Data/.cache/Skipped.cs": "using Nope;\n",
            "obj/Generated.cs": "using Nope;\n",
        },
    )

    project = evaluate_project(project_path)

    relative = [
        document.path.relative_to(project_path.parent).as_posix()
        for document in project.documents
    ]
    assert relative == ["A.cs", "Data/obj/Model.cs", "Features/Bin/Thing.cs"]


def test_compile_remove_and_disabled_default_items(solution_builder: SolutionBuilder) -> None:
    project_path = solution_builder.project(
        "App/App.csproj",
        {"Keep.cs": "", "Drop.cs": "", "Legacy/Old.cs": ""},
        body="""\
        <Project Sdk="Microsoft.NET.Sdk">
          <ItemGroup>
            <Compile Remove="Drop.cs;Legacy\\**" />
          </ItemGroup>
        </Project>
        """,
    )
    assert _names(d.path for d in evaluate_project(project_path).documents) == ["Keep.cs"]

    solution_builder.write(
        {
            "App/App.csproj": """\
            <Project Sdk="Microsoft.NET.Sdk">
              <PropertyGroup>
                <EnableDefaultCompileItems>false</EnableDefaultCompileItems>
              </PropertyGroup>
              <ItemGroup>
                <Compile Include="Legacy\\*.cs" />
              </ItemGroup>
            </Project>
            """
        }
    )
    assert _names(d.path for d in evaluate_project(project_path).documents) == ["Old.cs"]


def test_legacy_project_uses_explicit_items_only(solution_builder: SolutionBuilder) -> None:
    project_path = solution_builder.project(
        "Legacy/Legacy.csproj",
        {"Included.cs": "", "Ignored.cs": "", "Properties/AssemblyInfo.cs": ""},
        body="""\
        <?xml version="1.0" encoding="utf-8"?>
        <Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
          <ItemGroup>
            <Compile Include="Included.cs" />
            <Compile Include="Properties\\AssemblyInfo.cs" />
            <Compile Include="$(SharedDir)\\Shared.cs" />
          </ItemGroup>
          <ItemGroup>
            <ProjectReference Include="..\\Core\\Core.csproj" />
          </ItemGroup>
        </Project>
        """,
    )
    warnings: List[str] = []

    project = evaluate_project(project_path, warnings.append)

    assert _names(d.path for d in project.documents) == ["Included.cs", "AssemblyInfo.cs"]
    assert project.references == [solution_builder.path() / "Core" / "Core.csproj"]
    assert len(warnings) == 1
    assert "$(SharedDir)" in warnings[0]


def test_include_with_exclude(solution_builder: SolutionBuilder) -> None:
    project_path = solution_builder.project(
        "App/App.csproj",
        {"A.cs": "", "B.cs": ""},
        body="""\
        <Project>
          <ItemGroup>
            <Compile Include="*.cs" Exclude="B.cs" />
          </ItemGroup>
        </Project>
        """,
    )

    assert _names(d.path for d in evaluate_project(project_path).documents) == ["A.cs"]


def test_non_csharp_project_has_language_tag(solution_builder: SolutionBuilder) -> None:
    project_path = solution_builder.project(
        "Vb/Vb.vbproj", {"Module1.vb": ""}, body='<Project Sdk="Microsoft.NET.Sdk" />\n'
    )

    project = evaluate_project(project_path)

    assert project.language == "Visual Basic"
    assert project.documents == []


def test_unknown_extension_is_an_evaluation_error(solution_builder: SolutionBuilder) -> None:
    solution_builder.write({"Native/Native.vcxproj": "<Project />\n"})

    with pytest.raises(ProjectEvaluationError, match="not associated with a language"):
        evaluate_project(solution_builder.path() / "Native" / "Native.vcxproj")


def test_malformed_xml_is_an_evaluation_error(solution_builder: SolutionBuilder) -> None:
    solution_builder.write({"Broken/Broken.csproj": "<Project"})

    with pytest.raises(ProjectEvaluationError):
        evaluate_project(solution_builder.path() / "Broken" / "Broken.csproj")
