"""Excel export."""
from time_tracker.excel.generator import generate_history_workbook

__all__ = ["generate_history_workbook"]
