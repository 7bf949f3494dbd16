"""
Intake Context

Responsibilities:
- Validates uploaded resume files (PDF/DOCX, size cap) and extracts their text
- Parses resume text into confidence-scored candidate fields
- Reconciles the user's selection into section model edits

Owns: Upload parsing, ParsedField/ParsedResume, reconciliation
Never: Writes to the section model directly (edits go through the engine)
"""

from folio.contexts.intake.parsed_data_structure import ParsedField, ParsedResume, confidence_label
from folio.contexts.intake.reconciler import commit_parsed, merge_parsed, reconcile
from folio.contexts.intake.resume_parser import parse_resume, parse_resume_file, parse_resume_text

__all__ = [
    "ParsedField",
    "ParsedResume",
    "confidence_label",
    "parse_resume",
    "parse_resume_file",
    "parse_resume_text",
    "reconcile",
    "merge_parsed",
    "commit_parsed",
]
