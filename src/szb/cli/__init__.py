"""
szb Command-Line Interface
==========================

The ``szb`` command is a Click group with three subcommands:

- **run**: answer display prompts with composed frames
- **ports**: list serial ports and suggest one
- **preview**: print frames to the terminal for checking styles
"""

__all__ = ["main", "errors"]
