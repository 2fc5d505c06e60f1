"""
Commit Summary Service

Extractive, word-limited summaries of commit messages.
"""

__version__ = "1.0.1"
__description__ = "Extractive commit message summarization"
