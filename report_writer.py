import logging
import os

import pandas as pd
from openpyxl.utils import get_column_letter

from comparison_engine import summarize

logger = logging.getLogger(__name__)

REPORT_SHEET = 'Comparison Report'
SUMMARY_SHEET = 'Summary'
DUPLICATES_SHEET = 'Duplicate Keys Warning'
DUPLICATES_WARNING = 'Warning: Duplicate keys found in destination file'
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_COLUMN_WIDTH = 80


def report_headers(source_columns, destination_columns):
    """Header row of the comparison sheet."""
    headers = ['TimeStamp']
    headers.extend(f"Source_{column}" for column in source_columns)
    headers.extend(f"Dest_{column}" for column in destination_columns)
    headers.extend(['Status', 'Message'])
    return headers


def default_report_name(source_path, destination_path):
    source_name = os.path.splitext(os.path.basename(str(source_path or '')))[0]
    destination_name = os.path.splitext(os.path.basename(str(destination_path or '')))[0]
    return f"{source_name}_Compare_{destination_name}_Report.xlsx"


def report_frame(result):
    """
    Lay the report rows out as a DataFrame, one line per source row.

    Column labels are positional so duplicate header names (e.g. a source
    column literally called 'Status') cannot collide; the header line is
    written separately.
    """
    records = [
        [row.timestamp.strftime(TIMESTAMP_FORMAT), *row.source_values,
         *row.destination_values, row.status.value, row.message]
        for row in result.rows
    ]
    width = 1 + len(result.source_columns) + len(result.destination_columns) + 2
    return pd.DataFrame(records, columns=range(width))


def summary_frame(result):
    summary = summarize(result)
    summary_data = {
        'Metric': [
            'Total source records',
            'Full Match',
            'Half Match',
            'Not found',
            'Duplicate destination keys',
            'Match rate percentage',
        ],
        'Value': [
            summary.total_rows,
            summary.full_match,
            summary.half_match,
            summary.not_found,
            summary.duplicate_keys,
            f"{summary.match_rate:.2f}%",
        ],
    }
    return pd.DataFrame(summary_data)


def duplicates_frame(duplicate_keys):
    lines = [DUPLICATES_WARNING, 'Duplicate Keys:', *duplicate_keys]
    return pd.DataFrame({'': lines})


def keep_text_literal(worksheet):
    """Store every string cell as text, so values like '=1+1' are not turned into formulas."""
    for row in worksheet.iter_rows():
        for cell in row:
            if isinstance(cell.value, str):
                cell.data_type = 's'


def fit_column_widths(worksheet):
    """Size every column to its longest cell."""
    for index, column_cells in enumerate(worksheet.iter_cols(), start=1):
        longest = max((len(str(cell.value)) for cell in column_cells if cell.value is not None),
                      default=0)
        worksheet.column_dimensions[get_column_letter(index)].width = min(longest + 2, MAX_COLUMN_WIDTH)


def write_report(result, output_path):
    """
    Save the comparison workbook.

    Sheets:
        Comparison Report - every source row with its destination match, status and message
        Summary - counts per status and the match rate
        Duplicate Keys Warning - only when the destination had duplicate keys

    Args:
        result (ReconciliationResult): Output of ReconciliationEngine.run()
        output_path (str): Target .xlsx path

    Returns:
        str: The path written
    """
    logger.info("Saving report to: %s", output_path)

    headers = report_headers(result.source_columns, result.destination_columns)
    report = report_frame(result)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        pd.DataFrame([headers]).to_excel(writer, sheet_name=REPORT_SHEET, index=False, header=False)
        report.to_excel(writer, sheet_name=REPORT_SHEET, index=False, header=False, startrow=1)

        summary_frame(result).to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)

        if result.duplicate_keys:
            duplicates_frame(result.duplicate_keys).to_excel(
                writer, sheet_name=DUPLICATES_SHEET, index=False, header=False)

        keep_text_literal(writer.sheets[REPORT_SHEET])
        if result.duplicate_keys:
            keep_text_literal(writer.sheets[DUPLICATES_SHEET])

        for worksheet in writer.sheets.values():
            fit_column_widths(worksheet)

    logger.info("Report saved: %d rows, %d duplicate keys", len(result.rows), len(result.duplicate_keys))
    return output_path
