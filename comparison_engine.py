import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import pandas as pd

from destination_index import build_destination_index, cell_text
from key_replacements import apply_replacements
from value_normalizer import NormalizationOptions, equal_under_options

logger = logging.getLogger(__name__)

FULL_MATCH_MESSAGE = 'All columns match'
HALF_MATCH_MESSAGE = 'Column not match: {columns}'
NOT_FOUND_MESSAGE = 'Can not find the match column data!'


class MatchStatus(Enum):
    FULL_MATCH = 'Full Match'
    HALF_MATCH = 'Half Match'
    NOT_FOUND = 'Not found'


class ReconciliationNotReady(Exception):
    """Raised when a run is started without both datasets and key columns."""


@dataclass(frozen=True)
class ReportRow:
    timestamp: datetime
    source_values: tuple
    destination_values: tuple
    status: MatchStatus
    message: str


@dataclass(frozen=True)
class ReconciliationResult:
    rows: tuple
    duplicate_keys: tuple
    source_columns: tuple
    destination_columns: tuple


@dataclass(frozen=True)
class ReconciliationSummary:
    total_rows: int
    full_match: int
    half_match: int
    not_found: int
    duplicate_keys: int
    match_rate: float = 0.0


def dataset_rows(dataset):
    """
    Turn a DataFrame into a list of column name -> text dicts.
    NaN/None cells become empty text.
    """
    if dataset.empty:
        return []
    text = dataset.astype(object).where(pd.notna(dataset), '')
    return [
        {str(column): str(value) for column, value in record.items()}
        for record in text.to_dict('records')
    ]


def summarize(result):
    """
    Count report rows per status.

    Args:
        result (ReconciliationResult): Output of a reconciliation run

    Returns:
        ReconciliationSummary: Totals and the full-match rate in percent
    """
    counts = {status: 0 for status in MatchStatus}
    for row in result.rows:
        counts[row.status] += 1

    total = len(result.rows)
    match_rate = (counts[MatchStatus.FULL_MATCH] / total * 100) if total > 0 else 0.0

    return ReconciliationSummary(
        total_rows=total,
        full_match=counts[MatchStatus.FULL_MATCH],
        half_match=counts[MatchStatus.HALF_MATCH],
        not_found=counts[MatchStatus.NOT_FOUND],
        duplicate_keys=len(result.duplicate_keys),
        match_rate=match_rate,
    )


class ReconciliationEngine:
    """
    Matches every source row against the destination dataset by key and
    classifies it as Full Match, Half Match or Not found.

    An engine holds a private copy of its configuration and is meant for a
    single run; create a new one for every run.
    """

    def __init__(self, source_data, destination_data, source_key_column,
                 destination_key_column, column_mappings=(), replacement_rules=(),
                 options=None, clock=datetime.now):
        """
        Args:
            source_data (pd.DataFrame): Source dataset
            destination_data (pd.DataFrame): Destination dataset
            source_key_column (str): Key column in the source dataset
            destination_key_column (str): Key column in the destination dataset
            column_mappings (list[ColumnMapping]): Source -> destination columns to compare
            replacement_rules (list[ReplacementRule]): Rules applied to key values
            options (NormalizationOptions): Value comparison flags
            clock (callable): Returns the timestamp stamped on each report row
        """
        self.source_data = source_data
        self.destination_data = destination_data
        self.source_key_column = source_key_column
        self.destination_key_column = destination_key_column
        self.column_mappings = tuple(column_mappings or ())
        self.replacement_rules = tuple(replacement_rules or ())
        self.options = options or NormalizationOptions()
        self.clock = clock

        self.duplicate_keys = []

    def check_ready(self):
        """Raise ReconciliationNotReady unless the run has everything it needs."""
        if self.source_data is None:
            raise ReconciliationNotReady('Source dataset is not loaded')
        if self.destination_data is None:
            raise ReconciliationNotReady('Destination dataset is not loaded')
        if not self.source_key_column:
            raise ReconciliationNotReady('Source key column is not selected')
        if not self.destination_key_column:
            raise ReconciliationNotReady('Destination key column is not selected')
        if self.source_key_column not in self.source_data.columns:
            raise ReconciliationNotReady(
                f"Source key column '{self.source_key_column}' not found in source dataset")
        if self.destination_key_column not in self.destination_data.columns:
            raise ReconciliationNotReady(
                f"Destination key column '{self.destination_key_column}' not found in destination dataset")

    def compared_columns(self):
        return [
            (mapping.source_column, mapping.destination_column)
            for mapping in self.column_mappings
            if mapping.source_column and mapping.destination_column
        ]

    def find_mismatches(self, source_row, destination_row):
        """Return the mapped source columns whose values differ, in mapping order."""
        mismatches = []
        for source_column, destination_column in self.compared_columns():
            source_value = cell_text(source_row, source_column)
            destination_value = cell_text(destination_row, destination_column)
            if not equal_under_options(source_value, destination_value, self.options):
                mismatches.append(source_column)
        return mismatches

    def classify(self, source_row, index, source_columns, destination_columns):
        """Build the report row for one source row."""
        timestamp = self.clock()
        source_key = apply_replacements(cell_text(source_row, self.source_key_column),
                                        self.replacement_rules)
        source_values = tuple(cell_text(source_row, column) for column in source_columns)

        destination_row = index.get(source_key)
        if destination_row is None:
            return ReportRow(
                timestamp=timestamp,
                source_values=source_values,
                destination_values=tuple('' for _ in destination_columns),
                status=MatchStatus.NOT_FOUND,
                message=NOT_FOUND_MESSAGE,
            )

        destination_values = tuple(cell_text(destination_row, column) for column in destination_columns)
        mismatches = self.find_mismatches(source_row, destination_row)
        if mismatches:
            status = MatchStatus.HALF_MATCH
            message = HALF_MATCH_MESSAGE.format(columns=','.join(mismatches))
        else:
            status = MatchStatus.FULL_MATCH
            message = FULL_MATCH_MESSAGE

        return ReportRow(
            timestamp=timestamp,
            source_values=source_values,
            destination_values=destination_values,
            status=status,
            message=message,
        )

    def iter_report_rows(self):
        """
        Yield one ReportRow per source row, in source order.

        The destination index is built completely before the first source
        row is classified.
        """
        self.check_ready()

        source_columns = [str(column) for column in self.source_data.columns]
        destination_columns = [str(column) for column in self.destination_data.columns]

        index, duplicates = build_destination_index(
            dataset_rows(self.destination_data),
            self.destination_key_column,
            self.replacement_rules,
        )
        self.duplicate_keys = duplicates
        if duplicates:
            logger.warning("Duplicate keys found in destination: %s", ', '.join(duplicates))

        for source_row in dataset_rows(self.source_data):
            yield self.classify(source_row, index, source_columns, destination_columns)

    def run(self):
        """
        Execute the reconciliation.

        Returns:
            ReconciliationResult: Report rows, duplicate keys and column lists

        Raises:
            ReconciliationNotReady: A dataset or key column is missing
        """
        logger.info(
            "Reconciling source [%s] with destination [%s] (%d mapped columns, %d replacement rules)",
            self.source_key_column, self.destination_key_column,
            len(self.compared_columns()), len(self.replacement_rules),
        )
        rows = tuple(self.iter_report_rows())

        result = ReconciliationResult(
            rows=rows,
            duplicate_keys=tuple(self.duplicate_keys),
            source_columns=tuple(str(column) for column in self.source_data.columns),
            destination_columns=tuple(str(column) for column in self.destination_data.columns),
        )
        logger.info("Reconciliation finished: %d source rows processed", len(rows))
        return result

    def submit(self, executor):
        """
        Hand the whole run to a ``concurrent.futures`` executor.

        Returns:
            Future: Resolves to the ReconciliationResult, or raises what run() raised
        """
        return executor.submit(self.run)
