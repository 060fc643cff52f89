"""pensmith package.

Workspace, config, prompt templates, frontmatter documents and style-sample
selection for the pensmith writing assistant. The CLI lives in pensmith.cli.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "context",
    "corpus",
    "env",
    "frontmatter",
    "llm",
    "sampling",
    "templates",
    "workspace",
]
