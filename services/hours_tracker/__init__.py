"""
Hours Tracker Service for give-me-hours.

This service is responsible for:
- Reading commit timestamps from a local Git repository
- Parsing raw log lines into commit records
- Estimating working time with the gap-threshold heuristic
- Building the one-line hours report
"""

__version__ = "1.0.1"
__description__ = "Working-time estimation from Git commit history"
