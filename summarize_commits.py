#!/usr/bin/env python3
"""
Commit message summary CLI

Reads commit messages from stdin, one per line, and prints a short
extractive summary limited to a number of words.

Usage:
    git log --pretty=format:%s | python summarize_commits.py --words 50
"""

import logging

import click
from rich.console import Console

from config.settings import settings
from services.commit_summary.summarizer import CommitSummarizer, parse_word_limit

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.monitoring.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Rich console
console = Console()


@click.command()
@click.version_option(version=settings.version, prog_name="commit-summary")
@click.option(
    '--words', '-w',
    default=str(settings.hours.word_limit),
    help='Maximum number of words in summary'
)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def summarize(words: str, verbose: bool):
    """Summarize git commit messages read from stdin."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    word_limit = parse_word_limit(words)
    text = click.get_text_stream("stdin").read()

    summarizer = CommitSummarizer(max_sentences=settings.hours.summary_sentences)
    result = summarizer.summarize(text.splitlines(), word_limit)
    logger.debug(f"Summary strategy: {result.strategy.value}")

    console.print(result.text, markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    summarize()
