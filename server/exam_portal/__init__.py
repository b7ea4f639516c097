"""Exam portal: exam creation, submission scoring and result statistics."""

__version__ = "1.0.0"
