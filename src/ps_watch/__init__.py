"""
PowerSchool Grade Watch

Polls a PowerSchool parent portal for class grades and graded assignments,
diffs them against the last saved snapshot, and posts the changes to Discord.
"""

__version__ = "1.0.0"
