"""Naive Bayes payee classifier.

Classes are account names (e.g. every account containing ``"Expenses"``);
documents are transaction payees. Training counts payee words per class from
the existing journal; classification picks the class with the highest
log-probability for a new payee string.

Smoothing:

- word likelihood ``P(w|c) = (freq(w, c) + 1) / (total(c) + vocab(c))``, where
  ``vocab(c)`` is the number of distinct words seen for class ``c``; a class
  with no words at all uses the fixed floor ``1e-11``
- class prior ``P(c) = (total(c) + 1) / (sum(total) + n_classes)``, smoothed
  by word totals rather than document counts

The trained model is an immutable value; build one per import run.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from .logging_setup import get_logger
from .models import Transaction

UNKNOWN_ACCOUNT = "unknown:unknown"
DEFAULT_PROB = 1e-11

_logger = get_logger("textledger.classifier")


def tokenize(text: str) -> list[str]:
    """Lowercase and split on whitespace runs."""

    return text.lower().split()


@dataclass(frozen=True, slots=True)
class ClassData:
    total: int
    freqs: Mapping[str, int]

    def word_prob(self, word: str) -> float:
        vocab = len(self.freqs)
        if self.total == 0 or vocab == 0:
            return DEFAULT_PROB
        return (self.freqs.get(word, 0) + 1) / (self.total + vocab)


@dataclass(frozen=True, slots=True)
class PayeeClassifier:
    """Trained model: classes in discovery order plus per-class word counts."""

    classes: tuple[str, ...]
    data: Mapping[str, ClassData]
    learned: int = 0

    def priors(self) -> list[float]:
        n = len(self.classes)
        totals = [self.data[c].total for c in self.classes]
        denom = float(sum(totals) + n)
        return [(t + 1) / denom for t in totals]

    def log_scores(self, words: Sequence[str]) -> list[float]:
        scores: list[float] = []
        for cls, prior in zip(self.classes, self.priors(), strict=True):
            data = self.data[cls]
            score = math.log(prior)
            for word in words:
                score += math.log(data.word_prob(word))
            scores.append(score)
        return scores

    def classify(self, text: str) -> str:
        return classify(self, text)


def discover_classes(transactions: Iterable[Transaction], class_substring: str) -> list[str]:
    """Distinct posting accounts containing ``class_substring`` (case-insensitive)."""

    needle = class_substring.lower()
    seen: dict[str, None] = {}
    for txn in transactions:
        for posting in txn.postings:
            if needle in posting.account.lower():
                seen.setdefault(posting.account, None)
    return list(seen)


def train(transactions: Sequence[Transaction], class_substring: str) -> PayeeClassifier:
    """Build a classifier from the payees of existing transactions.

    A transaction with postings in several classes counts its payee words
    once toward each of those postings' classes.
    """

    classes = discover_classes(transactions, class_substring)
    class_set = set(classes)
    freqs: dict[str, Counter[str]] = {c: Counter() for c in classes}
    totals: dict[str, int] = dict.fromkeys(classes, 0)
    learned = 0

    for txn in transactions:
        words = tokenize(txn.payee)
        for posting in txn.postings:
            if posting.account not in class_set:
                continue
            freqs[posting.account].update(words)
            totals[posting.account] += len(words)
            learned += 1

    data = {
        c: ClassData(total=totals[c], freqs=MappingProxyType(dict(freqs[c]))) for c in classes
    }
    _logger.debug(
        "trained classifier: %d classes from %d postings (search %r)",
        len(classes),
        learned,
        class_substring,
    )
    return PayeeClassifier(classes=tuple(classes), data=MappingProxyType(data), learned=learned)


def find_max(scores: Sequence[float]) -> int:
    """Index of the highest score; the earliest index wins ties."""

    best = 0
    for i in range(1, len(scores)):
        if scores[best] < scores[i]:
            best = i
    return best


def classify(model: PayeeClassifier, text: str) -> str:
    words = tokenize(text)
    if not words or not model.classes:
        return UNKNOWN_ACCOUNT
    return model.classes[find_max(model.log_scores(words))]


__all__ = [
    "ClassData",
    "DEFAULT_PROB",
    "PayeeClassifier",
    "UNKNOWN_ACCOUNT",
    "classify",
    "discover_classes",
    "find_max",
    "tokenize",
    "train",
]
