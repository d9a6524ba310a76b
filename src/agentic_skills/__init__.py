"""
Agentic Skills - skills, agents and hooks for AI coding assistants.

One source tree of skills and agent personas, installed into Claude Code,
OpenCode, Cursor or Codex CLI in the layout each tool expects.
"""

__version__ = "1.3.0"
