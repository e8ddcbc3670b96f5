"""
schemas package: venue records, program dataclasses and request models.
"""
