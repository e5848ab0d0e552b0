"""
Return completeness rules.

Scores a tax return and its computed result for missing information and
suggests what to collect next.
"""

from .gap_analysis import GapAnalysisResult, GapItem, analyze_gaps
from .rule_types import GapCategory, GapPriority

__all__ = [
    'GapAnalysisResult',
    'GapItem',
    'analyze_gaps',
    'GapCategory',
    'GapPriority',
]
