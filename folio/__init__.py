"""
FOLIO - structured resume authoring, preview and export

A domain-driven resume builder: users author a structured profile, pick a
template, preview the rendered resume and export it as PDF or DOCX. Uploaded
resumes can be parsed into confidence-scored candidate fields and merged back
into the structured profile.

Architecture:
- Sections Context: Section metadata, the section model and its edit engine
- Intake Context: Uploaded resume parsing and reconciliation of parsed data
- Templating Context: Template catalog, section binding and HTML preview
- Rendering Context: PDF and DOCX export adapters
"""

__version__ = "0.1.0"
