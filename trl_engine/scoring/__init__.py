"""
scoring/ - Consensus & Disagreement Engine

Modules:
    utils.py                 - Decimal utilities
    consensus.py             - Weighted average, median, conservative and Delphi consensus
    disagreement.py          - Pairwise disagreement detection
    evidence_confidence.py   - Evidence-completeness confidence
    quality_calculator.py    - Composite assessment quality
"""
