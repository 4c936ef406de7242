"""
Workflow orchestration and reporting.
"""

from .main import AnalysisResult, LandcoverCartAnalysis
from .report import report_dict, format_report, print_report, save_report

__all__ = [
    'AnalysisResult',
    'LandcoverCartAnalysis',
    'report_dict',
    'format_report',
    'print_report',
    'save_report',
]
