"""
Extractive summaries of commit messages.

Messages are trimmed and deduplicated, then the most central ones are
picked with LexRank: TF-IDF cosine similarity between every pair of
messages forms a graph whose stationary distribution ranks the messages.
When ranking cannot produce scores the first messages are used instead.
"""

import logging
import math
import re
from collections import Counter, defaultdict
from typing import Iterable, List, Optional, Sequence

import numpy as np

from config.settings import DEFAULT_SUMMARY_SENTENCES, DEFAULT_WORD_LIMIT
from shared.models import NO_MESSAGES, SummaryCandidate, SummaryResult, SummaryStrategy

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\w+")
RANKED_SEPARATOR = " "
FALLBACK_SEPARATOR = "; "
MAX_RANKED_CANDIDATES = 2000

# Errors a scorer may raise on degenerate or oversized input
SCORING_ERRORS = (MemoryError, ValueError, FloatingPointError, np.linalg.LinAlgError)


def tokenize(text: str) -> List[str]:
    return _TOKEN_PATTERN.findall(text.lower())


def truncate_words(text: str, limit: int) -> str:
    """Keep the first ``limit`` whitespace-delimited words."""
    return " ".join(text.split()[:limit])


def parse_word_limit(value, default: int = DEFAULT_WORD_LIMIT) -> int:
    """Read a word limit leniently; anything but a positive integer gives ``default``."""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid word limit {value!r}, using {default}")
        return default
    if limit <= 0:
        logger.warning(f"Invalid word limit {value!r}, using {default}")
        return default
    return limit


def prepare_messages(messages: Iterable[str]) -> List[SummaryCandidate]:
    """Trim, drop blanks and keep the first occurrence of each message."""
    seen = set()
    candidates = []
    for message in messages:
        text = message.strip()
        if not text or text in seen:
            continue
        seen.add(text)
        candidates.append(SummaryCandidate(text=text, index=len(candidates)))
    return candidates


class LexRankScorer:
    """Scores sentences by centrality in a thresholded similarity graph."""

    def __init__(
        self,
        threshold: float = 0.1,
        damping: float = 0.85,
        tolerance: float = 1e-6,
        max_iterations: int = 100,
        max_candidates: int = MAX_RANKED_CANDIDATES,
    ):
        self.threshold = threshold
        self.damping = damping
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.max_candidates = max_candidates

    def similarity_matrix(self, documents: Sequence[Sequence[str]]) -> Optional[np.ndarray]:
        """Pairwise TF-IDF cosine similarity; None when there is no vocabulary.

        Term weights are kept per document and combined through per-token
        postings, so memory grows with the number of documents squared and
        not with the vocabulary size.
        """
        n = len(documents)
        counts = [Counter(tokens) for tokens in documents]
        document_frequency = Counter(token for count in counts for token in count)
        if not document_frequency:
            return None

        postings = defaultdict(list)
        for row, count in enumerate(counts):
            weights = {
                token: tf * (math.log((1 + n) / (1 + document_frequency[token])) + 1.0)
                for token, tf in count.items()
            }
            # Rows without tokens stay all-zero
            norm = math.sqrt(sum(weight * weight for weight in weights.values()))
            for token, weight in weights.items():
                postings[token].append((row, weight / norm))

        similarity = np.zeros((n, n))
        for entries in postings.values():
            rows = np.array([row for row, _ in entries])
            values = np.array([value for _, value in entries])
            similarity[np.ix_(rows, rows)] += np.outer(values, values)
        return similarity

    def score(self, texts: Sequence[str]) -> Optional[np.ndarray]:
        """Return one score per text, or None when ranking is not possible."""
        n = len(texts)
        if n < 2:
            return None
        if n > self.max_candidates:
            logger.info(f"{n} messages exceed the ranking limit of {self.max_candidates}")
            return None

        similarity = self.similarity_matrix([tokenize(text) for text in texts])
        if similarity is None:
            logger.debug("No scorable tokens in commit messages")
            return None

        adjacency = (similarity >= self.threshold).astype(float)
        degree = adjacency.sum(axis=1)
        transition = np.full((n, n), 1.0 / n)
        linked = degree > 0
        transition[linked] = adjacency[linked] / degree[linked][:, None]

        markov = self.damping * transition + (1.0 - self.damping) / n
        scores = np.full(n, 1.0 / n)
        for _ in range(self.max_iterations):
            updated = markov.T @ scores
            if not np.all(np.isfinite(updated)):
                return None
            if np.abs(updated - scores).sum() < self.tolerance:
                return updated
            scores = updated

        logger.debug("LexRank did not converge")
        return None


class CommitSummarizer:
    """Deduplicates commit messages and extracts a word-limited summary."""

    def __init__(
        self,
        max_sentences: int = DEFAULT_SUMMARY_SENTENCES,
        scorer: Optional[LexRankScorer] = None,
    ):
        self.max_sentences = max_sentences
        self.scorer = scorer or LexRankScorer()

    def rank(self, candidates: List[SummaryCandidate]) -> Optional[List[SummaryCandidate]]:
        """Top candidates by LexRank score in original order, or None."""
        try:
            scores = self.scorer.score([candidate.text for candidate in candidates])
        except SCORING_ERRORS as e:
            logger.warning(f"Ranking failed: {e!r}")
            return None
        if scores is None:
            return None

        scored = [
            candidate.model_copy(update={"score": float(score)})
            for candidate, score in zip(candidates, scores)
        ]
        count = min(self.max_sentences, len(scored))
        # Rounding keeps ties between equal scores deterministic
        best = sorted(scored, key=lambda c: (-round(c.score, 12), c.index))[:count]
        return sorted(best, key=lambda c: c.index)

    def fallback(self, candidates: List[SummaryCandidate]) -> List[SummaryCandidate]:
        """First candidates in original order."""
        return candidates[:min(self.max_sentences, len(candidates))]

    def summarize(self, messages: Iterable[str], word_limit: int = DEFAULT_WORD_LIMIT) -> SummaryResult:
        """Summarize ``messages`` into at most ``word_limit`` words."""
        word_limit = parse_word_limit(word_limit)
        candidates = prepare_messages(messages)

        if not candidates:
            return SummaryResult(text=NO_MESSAGES, strategy=SummaryStrategy.EMPTY)

        if len(candidates) == 1:
            only = candidates[0].text
            return SummaryResult(
                text=truncate_words(only, word_limit),
                strategy=SummaryStrategy.SINGLE,
                selected=[only],
            )

        ranked = self.rank(candidates)
        if ranked is not None:
            strategy = SummaryStrategy.RANKED
            selected = [candidate.text for candidate in ranked]
            text = RANKED_SEPARATOR.join(selected)
        else:
            logger.info("Ranking unavailable, using the first commit messages")
            strategy = SummaryStrategy.FALLBACK
            selected = [candidate.text for candidate in self.fallback(candidates)]
            text = FALLBACK_SEPARATOR.join(selected)

        return SummaryResult(
            text=truncate_words(text, word_limit),
            strategy=strategy,
            selected=selected,
        )


def summarize(messages: Iterable[str], word_limit: int = DEFAULT_WORD_LIMIT) -> str:
    """Summary text for ``messages``; the "no messages" sentinel when empty."""
    return CommitSummarizer().summarize(messages, word_limit).text
