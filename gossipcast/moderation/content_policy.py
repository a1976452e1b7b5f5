"""Content policy: a pluggable, ordered rule set evaluated against messages.

Rules are checked in order and the first match rejects the message.  The
built-in rule set blocks Korean profanity, contact details (phone numbers,
handles, messenger app names, URLs), meaningless character runs and
digits-only messages.  Alternative rule sets can be loaded from YAML with
:func:`load_content_policy`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from gossipcast.moderation.models import ALLOWED, PolicyDecision

# ---------------------------------------------------------------------------
# Built-in blocklists / patterns
# ---------------------------------------------------------------------------

_BANNED_TERMS: list[str] = [
    "시발", "씨발", "개새끼", "병신", "좆", "존나", "개놈", "년", "놈", "디져", "뒤져",
    "보지", "자지", "따먹", "강간", "섹스", "쎅스", "빠구리", "창녀", "창년", "창놈",
    "죽어", "죽일", "살인", "폭행", "테러", "자살", "마약", "대마초", "도박", "미친",
    "개미친", "또라이", "정신병자", "바보", "멍청이", "븅신", "니미", "니애미",
    "개쓰레기", "쓰레기", "썅", "시발놈", "개자식", "자식", "개년", "걸레",
]

# Phone numbers, handles, messenger apps, websites (case-sensitive, ASCII \d and \w)
_CONTACT_PATTERNS: list[str] = [
    r"\d{3}-?\d{4}-?\d{4}",
    r"010-?\d{4}-?\d{4}",
    r"@[a-zA-Z0-9]+",
    r"카톡|텔레|라인|위챗|인스타|페북",
    r"http|www\.|\.com|\.kr",
]

_MIN_REPEAT_RUN = 4

_NUMERIC_ONLY = re.compile(r"[0-9][0-9\s\-()]*")


class RuleKind(Enum):
    """How a rule inspects the message."""

    TERMS = "terms"  # case-insensitive substring match
    PATTERNS = "patterns"  # regex search, case-sensitive, ASCII-only classes
    REPETITION = "repetition"  # any character repeated min_run+ times in a row
    NUMERIC_ONLY = "numeric_only"  # digits and separator punctuation only


_DEFAULTS: dict[RuleKind, tuple[str, str]] = {
    RuleKind.TERMS: ("profanity", "부적절한 언어가 포함되어 있습니다"),
    RuleKind.PATTERNS: ("contact_info", "개인정보나 연락처가 포함되어 있을 수 있습니다"),
    RuleKind.REPETITION: ("repetition", "의미 없는 반복 문자는 사용할 수 없습니다"),
    RuleKind.NUMERIC_ONLY: ("numeric_only", "숫자만으로는 메시지를 작성할 수 없습니다"),
}


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass
class ContentRule:
    """A single content rule."""

    name: str
    kind: RuleKind
    violation_type: str = ""
    reason: str = ""
    terms: list[str] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)
    min_run: int = _MIN_REPEAT_RUN
    _compiled: list[re.Pattern[str]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        default_type, default_reason = _DEFAULTS[self.kind]
        self.violation_type = self.violation_type or default_type
        self.reason = self.reason or default_reason
        self._terms_folded = [t.lower() for t in self.terms]
        if self.kind == RuleKind.PATTERNS:
            self._compiled = [re.compile(p, re.ASCII) for p in self.patterns]
        elif self.kind == RuleKind.REPETITION:
            if self.min_run < 2:
                raise ValueError(f"Rule {self.name!r}: min_run must be at least 2")
            self._compiled = [re.compile(rf"(.)\1{{{self.min_run - 1},}}")]
        else:
            self._compiled = []

    def matches(self, text: str) -> bool:
        if self.kind == RuleKind.TERMS:
            folded = text.lower()
            return any(term in folded for term in self._terms_folded)
        if self.kind == RuleKind.NUMERIC_ONLY:
            return _NUMERIC_ONLY.fullmatch(text) is not None
        return any(pattern.search(text) for pattern in self._compiled)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentRule:
        return cls(
            name=data["name"],
            kind=RuleKind(data.get("kind", "terms")),
            violation_type=data.get("violation_type", ""),
            reason=data.get("reason", ""),
            terms=list(data.get("terms", [])),
            patterns=list(data.get("patterns", [])),
            min_run=int(data.get("min_run", _MIN_REPEAT_RUN)),
        )


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


@dataclass
class ContentPolicy:
    """An ordered collection of content rules."""

    name: str
    rules: list[ContentRule] = field(default_factory=list)

    def evaluate(self, content: str) -> PolicyDecision:
        """Return the decision of the first matching rule, or ALLOWED."""
        for rule in self.rules:
            if rule.matches(content):
                return PolicyDecision(
                    allowed=False,
                    reason=rule.reason,
                    violation_type=rule.violation_type,
                    rule=rule.name,
                )
        return ALLOWED


def default_content_policy() -> ContentPolicy:
    """The built-in rule set."""
    return ContentPolicy(
        name="default",
        rules=[
            ContentRule(name="banned-terms", kind=RuleKind.TERMS, terms=list(_BANNED_TERMS)),
            ContentRule(name="contact-info", kind=RuleKind.PATTERNS, patterns=list(_CONTACT_PATTERNS)),
            ContentRule(name="repeated-characters", kind=RuleKind.REPETITION),
            ContentRule(name="numeric-only", kind=RuleKind.NUMERIC_ONLY),
        ],
    )


def load_content_policy(path: str | Path) -> ContentPolicy:
    """Load a content policy from a YAML file.

    Expected layout::

        name: strict
        rules:
          - name: banned-terms
            kind: terms
            terms: [...]
          - name: contact-info
            kind: patterns
            patterns: [...]
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    rules = [ContentRule.from_dict(rule_data) for rule_data in data.get("rules", [])]
    return ContentPolicy(name=data.get("name", "unnamed"), rules=rules)
