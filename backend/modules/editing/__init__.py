"""
modules/editing package: concierge edits on generated programs.
"""
from modules.editing.program_editor import ProgramEditor

__all__ = ["ProgramEditor"]
