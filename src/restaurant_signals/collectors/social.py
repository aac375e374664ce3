"""
Social media sentiment collector.

Placeholder. Candidate sources (X, Instagram, Reddit, Google Trends) need paid
or business accounts; until one is chosen this collector always skips. It
stays registered so the scheduler keeps handling a permanently skipped job.
"""

from __future__ import annotations

from restaurant_signals.collectors.base import Collector

NOT_IMPLEMENTED = "not implemented"


class SocialSentimentCollector(Collector):
    """Always skipped."""

    name = "social"
    label = "Social Media Collector"
    requires_store = False

    def skip_reason(self) -> str | None:
        return NOT_IMPLEMENTED

    def collect(self) -> int:
        return 0
