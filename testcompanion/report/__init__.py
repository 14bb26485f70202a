"""Report Layer - rendering and JSON re-import."""

from .report_importer import ReportImportError, import_report, import_report_file
from .report_renderer import AREA_SEPARATOR, ExportFormat, area_path, escape_html, render_report, report_to_dict

__all__ = [
    "AREA_SEPARATOR",
    "ExportFormat",
    "ReportImportError",
    "area_path",
    "escape_html",
    "import_report",
    "import_report_file",
    "render_report",
    "report_to_dict",
]
