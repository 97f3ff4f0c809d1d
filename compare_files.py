import logging
import os
import sys

from column_mapper import apply_overrides, auto_map
from comparison_engine import ReconciliationEngine, ReconciliationNotReady, summarize
from compare_settings import load_settings
from report_writer import default_report_name, write_report
from tabular_loader import describe_file, is_supported_file, load_dataset

logger = logging.getLogger(__name__)


class FileComparison:
    """
    Compares a source file against a destination file by key column and
    writes a row-by-row comparison workbook.
    """

    def __init__(self, settings):
        """
        Args:
            settings (ComparisonSettings): Paths, key columns, rules and comparison flags
        """
        self.settings = settings

        # DataFrames to store loaded data
        self.source_df = None
        self.destination_df = None

        self.column_mappings = []
        self.result = None
        self.summary = None

    @property
    def output_file_path(self):
        if self.settings.output_file:
            return self.settings.output_file
        report_name = default_report_name(self.settings.source_file, self.settings.destination_file)
        return os.path.join(os.path.dirname(self.settings.source_file), report_name)

    def load_data(self):
        """Load both files; unsupported extensions raise ValueError."""
        for label, path in (('Source', self.settings.source_file),
                            ('Destination', self.settings.destination_file)):
            if not is_supported_file(path):
                raise ValueError(f"Please select a valid CSV or XLSX file for {label.lower()}: {path}")

        print(f"Loading Source file: {self.settings.source_file}")
        self.source_df = load_dataset(self.settings.source_file)
        print(describe_file(self.settings.source_file, self.source_df))

        print(f"\nLoading Destination file: {self.settings.destination_file}")
        self.destination_df = load_dataset(self.settings.destination_file)
        print(describe_file(self.settings.destination_file, self.destination_df))

    def map_columns(self):
        """Auto-map source columns onto destination columns, then apply user overrides."""
        mappings = auto_map(list(self.source_df.columns), list(self.destination_df.columns))
        self.column_mappings = apply_overrides(mappings, self.settings.mapping_overrides)

        print("\nColumn mapping:")
        for mapping in self.column_mappings:
            target = mapping.destination_column or '(not compared)'
            print(f"  - {mapping.source_column} -> {target}")

    def compare(self):
        engine = ReconciliationEngine(
            self.source_df,
            self.destination_df,
            self.settings.source_key_column,
            self.settings.destination_key_column,
            column_mappings=self.column_mappings,
            replacement_rules=self.settings.replacement_rules,
            options=self.settings.options,
        )
        print("\n=== Starting Comparison ===")
        print(f"Matching: Source [{self.settings.source_key_column}] with "
              f"Destination [{self.settings.destination_key_column}]")

        self.result = engine.run()
        self.summary = summarize(self.result)

    def print_summary(self):
        print("\n=== Comparison Summary ===")
        print("SOURCE (BASE):")
        print(f"  - Total records: {self.summary.total_rows}")
        print(f"  - Full Match: {self.summary.full_match}")
        print(f"  - Half Match: {self.summary.half_match}")
        print(f"  - Not found: {self.summary.not_found}")
        if self.summary.duplicate_keys:
            print(f"\nWARNING: {self.summary.duplicate_keys} duplicate key(s) in destination, "
                  f"last occurrence used")
        print(f"\nMatch Rate: {self.summary.match_rate:.2f}%")

    def save_results(self):
        output_file_path = self.output_file_path
        print(f"\nSaving results to: {output_file_path}")
        write_report(self.result, output_file_path)
        print("Results saved successfully!")
        return output_file_path

    def run_comparison(self):
        """
        Execute the full workflow: load, map, compare, summarize, save.
        """
        print("=" * 60)
        print("FILE COMPARISON")
        print("=" * 60)
        print("BASE RECORD: Source file")
        print("=" * 60)

        self.load_data()
        self.map_columns()
        self.compare()
        self.print_summary()
        output_file_path = self.save_results()

        print("\n" + "=" * 60)
        print("COMPARISON COMPLETE!")
        print("=" * 60)
        return output_file_path


def main():
    """
    Main function that reads configuration from the environment / .env file.
    """
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    missing = settings.missing_inputs()
    if missing:
        print(f"ERROR: Missing required settings: {', '.join(missing)}")
        return 2

    comparison = FileComparison(settings)
    try:
        comparison.run_comparison()
    except ReconciliationNotReady as e:
        print(f"ERROR: {e}")
        return 2
    except Exception as e:
        logger.exception("Comparison failed")
        print(f"ERROR: Comparison failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
