"""
Compatibility Quiz Scorer

This package scores how compatible two quiz participants are, based on
three free-text answers each.

Key Design Decisions:
- A remote scorer may be tried first; the local scorer is the fallback
- Local scoring is a bag-of-words Jaccard similarity per question
- Each question contributes equally to the final percentage
- The local scorer is total: it never raises for any input
"""

__version__ = "1.0.0"
