"""Count C# using directives across a project or solution."""

__version__ = "0.1.0"
