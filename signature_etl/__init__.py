"""
signature_etl

Match employee roster records to contact details scattered across messy
spreadsheets and contact-list exports, then render plain-text email
signatures (one LAST-FIRST.txt file per employee).
"""

__version__ = "0.3.0"
