"""
workflow/ - Multi-reviewer assessment lifecycle

Modules:
    transitions.py   - Legal actions per state, target states
    orchestrator.py  - One pure function per workflow action
    progress.py      - Progress and deadline queries
"""
