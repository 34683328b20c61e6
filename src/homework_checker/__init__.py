"""
Homework Submission Checker

Loads a student roster from layered configuration, scans a submission
directory for missing homework, and reminds missing students by email.
"""

__version__ = "0.2.0"
