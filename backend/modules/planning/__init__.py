"""
modules/planning package: turns a questionnaire into a day-by-day Program.
"""
from modules.planning.program_generator import ProgramGenerator
from modules.planning.stats import ProgramStats, program_stats

__all__ = ["ProgramGenerator", "ProgramStats", "program_stats"]
