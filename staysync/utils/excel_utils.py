"""
Excel workbook generation for report exports
"""

import io
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

_THIN = Side(style='thin')
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


class ExcelGenerator:
    """Builds styled worksheets and serializes the workbook in memory"""

    def __init__(self):
        self.workbook: Optional[Workbook] = None
        self.default_styles = self._create_default_styles()

    def _create_default_styles(self) -> Dict[str, Dict[str, Any]]:
        return {
            'header': {
                'font': Font(bold=True, color='FFFFFF'),
                'fill': PatternFill(start_color='366092', end_color='366092', fill_type='solid'),
                'alignment': Alignment(horizontal='center', vertical='center'),
                'border': _BORDER,
            },
            'data': {
                'font': Font(size=10),
                'alignment': Alignment(horizontal='left', vertical='center'),
                'border': _BORDER,
            },
            'number': {
                'font': Font(size=10),
                'number_format': '#,##0.00',
                'alignment': Alignment(horizontal='right', vertical='center'),
                'border': _BORDER,
            },
            'title': {
                'font': Font(bold=True, size=14, color='366092'),
                'alignment': Alignment(horizontal='left', vertical='center'),
            },
        }

    def create_workbook(self) -> Workbook:
        self.workbook = Workbook()
        # Drop the default sheet; every sheet is added explicitly
        self.workbook.remove(self.workbook.active)
        return self.workbook

    def add_worksheet(
        self,
        name: str,
        headers: Sequence[str],
        rows: List[Sequence[Any]],
        title: Optional[str] = None,
    ) -> str:
        """
        Add a sheet with an optional title row, a header row and data rows.

        Decimal values are written as numbers with a two-decimal format.
        """
        if self.workbook is None:
            self.create_workbook()

        ws = self.workbook.create_sheet(title=name)
        header_row = 1
        if title:
            ws.merge_cells(f'A1:{get_column_letter(len(headers))}1')
            ws['A1'] = title
            self._apply_style(ws['A1'], self.default_styles['title'])
            header_row = 3

        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=header_row, column=col, value=header)
            self._apply_style(cell, self.default_styles['header'])

        for row_idx, row_data in enumerate(rows, header_row + 1):
            for col_idx, value in enumerate(row_data, 1):
                if isinstance(value, Decimal):
                    cell = ws.cell(row=row_idx, column=col_idx, value=float(value))
                    self._apply_style(cell, self.default_styles['number'])
                else:
                    cell = ws.cell(row=row_idx, column=col_idx, value=value)
                    self._apply_style(cell, self.default_styles['data'])

        self._auto_adjust_columns(ws)
        return name

    def _apply_style(self, cell, style_dict: Dict[str, Any]):
        for attr, value in style_dict.items():
            setattr(cell, attr, value)

    def _auto_adjust_columns(self, worksheet):
        widths: Dict[int, int] = {}
        for row in worksheet.iter_rows():
            for cell in row:
                if cell.value is None or not hasattr(cell, 'column'):
                    continue
                widths[cell.column] = max(widths.get(cell.column, 0), len(str(cell.value)))
        for column, length in widths.items():
            worksheet.column_dimensions[get_column_letter(column)].width = min(length + 2, 50)

    def to_bytes(self) -> bytes:
        """Serialize the workbook to ``.xlsx`` bytes"""
        if self.workbook is None:
            raise ValueError("No workbook to save")
        buffer = io.BytesIO()
        self.workbook.save(buffer)
        return buffer.getvalue()
