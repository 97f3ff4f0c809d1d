import logging
import os

import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('.csv', '.xlsx')
CSV_ENCODINGS = ['utf-8', 'latin-1', 'iso-8859-1', 'cp1252']
PLACEHOLDER_COLUMN_NAME = 'Column'
SIZE_SUFFIXES = ['B', 'KB', 'MB', 'GB', 'TB']


def is_supported_file(file_path):
    return os.path.splitext(str(file_path))[1].lower() in SUPPORTED_EXTENSIONS


def clean_column_name(column_name):
    """
    Trim a header and collapse repeated spaces.
    Blank headers get a placeholder name.
    """
    if column_name is None or pd.isna(column_name):
        return PLACEHOLDER_COLUMN_NAME

    cleaned = ' '.join(part for part in str(column_name).split(' ') if part)
    if not cleaned.strip():
        return PLACEHOLDER_COLUMN_NAME
    return cleaned


def make_column_name_unique(base_name, existing_names):
    """Suffix ``base_name`` with _1, _2, ... until it is not in ``existing_names``."""
    if base_name not in existing_names:
        return base_name

    counter = 1
    new_name = f"{base_name}_{counter}"
    while new_name in existing_names:
        counter += 1
        new_name = f"{base_name}_{counter}"
    return new_name


def build_column_names(raw_headers):
    """Clean every header and make the resulting names unique, keeping order."""
    column_names = []
    for header in raw_headers:
        column_names.append(make_column_name_unique(clean_column_name(header), column_names))
    return column_names


def read_csv_with_fallback(file_path):
    """
    Read a CSV with every cell as text, trying several encodings.
    Rows longer than the header line are cut to the header width.

    Raises:
        ValueError: No encoding could decode the file
    """
    for encoding in CSV_ENCODINGS:
        try:
            header = pd.read_csv(file_path, header=None, dtype=str, keep_default_na=False,
                                 encoding=encoding, nrows=1)
            width = len(header.columns)
            raw = pd.read_csv(file_path, header=None, dtype=str, keep_default_na=False,
                              encoding=encoding, engine='python',
                              on_bad_lines=lambda fields: fields[:width])
            logger.debug("Loaded CSV %s with %s encoding", file_path, encoding)
            return raw
        except UnicodeDecodeError:
            continue
    raise ValueError(f"Could not load CSV file with any of the attempted encodings: {file_path}")


def read_xlsx(file_path):
    """Read the first worksheet of an .xlsx workbook with every cell as text."""
    return pd.read_excel(file_path, sheet_name=0, header=None, dtype=str, engine='openpyxl')


def to_dataset(raw):
    """
    Use the first row of a header-less frame as column names and return the
    remaining rows as text. Missing cells become ''.
    """
    if raw.empty:
        return pd.DataFrame()

    column_names = build_column_names(list(raw.iloc[0]))
    data = raw.iloc[1:].reset_index(drop=True)
    data.columns = column_names
    return data.fillna('').astype(str)


def load_dataset(file_path):
    """
    Load a .csv or .xlsx file into a DataFrame of text cells.

    Args:
        file_path (str): Path to the file

    Returns:
        pd.DataFrame: Rows in file order with unique, non-blank column names

    Raises:
        ValueError: Unsupported file format or undecodable CSV
    """
    extension = os.path.splitext(str(file_path))[1].lower()

    if extension == '.csv':
        raw = read_csv_with_fallback(file_path)
    elif extension == '.xlsx':
        raw = read_xlsx(file_path)
    else:
        raise ValueError(f"Unsupported file format: {file_path}")

    dataset = to_dataset(raw)
    logger.info("Loaded %s: %d rows, columns %s", file_path, len(dataset), list(dataset.columns))
    return dataset


def format_file_size(size):
    number = float(size)
    counter = 0
    while round(number / 1024) >= 1 and counter < len(SIZE_SUFFIXES) - 1:
        number /= 1024
        counter += 1
    return f"{number:,.1f}{SIZE_SUFFIXES[counter]}"


def describe_file(file_path, dataset):
    """One-line description of a loaded file: name, row count and size."""
    file_name = os.path.basename(str(file_path))
    size = os.path.getsize(file_path)
    return f"File: {file_name} | Items: {len(dataset)} | Size: {format_file_size(size)}"
