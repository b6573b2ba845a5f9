"""
CURATOR - Constrained Upselection of Résumé Achievements Tailored On Request

A domain-driven bullet curation system that scores a fixed pool of resume bullets
against a job description with an LLM and selects a bounded, diverse subset.

Architecture:
- Compendium Context: Immutable resume corpus (companies -> positions -> bullets)
- Scoring Context: LLM provider adapters, response validation, retry/fallback
- Targeting Context: Constraint-based selection and chronological reordering
"""

__version__ = "0.1.0"
