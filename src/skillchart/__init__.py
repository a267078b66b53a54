"""
SkillChart: radar charts and PDFs for skill-check survey responses.

Reads a Google Sheets form-responses spreadsheet, groups scored items into
skill categories, and files one chart spreadsheet (and PDF) per respondent.
"""

__version__ = "1.0.0"
