"""Report building and output."""

from .builder import IncompleteTaskError, build_partial_report, build_report
from .writer import ReportWriter

__all__ = ['IncompleteTaskError', 'build_partial_report', 'build_report', 'ReportWriter']
