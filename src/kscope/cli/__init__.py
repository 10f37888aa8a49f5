"""
Kscope Command-Line Interface
=============================

This package provides command-line tools for the kscope front end:

- **ksparse**: parse source and print the AST (tree or JSON report)
- **kslex**: print the token stream

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["ksparse", "kslex"]
