"""
Spreadsheet mirror.
"""

from pos_api.services.mirror.sheets import MirrorResult, SheetsMirror, get_mirror

__all__ = ["MirrorResult", "SheetsMirror", "get_mirror"]
