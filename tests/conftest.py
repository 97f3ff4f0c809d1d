from datetime import datetime

import pandas as pd
import pytest

FIXED_TIME = datetime(2024, 1, 15, 9, 30, 0)


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same timestamp, for byte-identical runs."""
    return lambda: FIXED_TIME


@pytest.fixture
def source_df():
    return pd.DataFrame({
        'ID': ['1', '2', '3', '4'],
        'Name': ['Alice', 'Bob', 'Carol', 'Dave'],
        'Email': ['alice@example.com', 'bob@example.com', 'carol@example.com', 'dave@example.com'],
    })


@pytest.fixture
def destination_df():
    return pd.DataFrame({
        'ID': ['1', '2', '3', '3'],
        'Name': ['alice ', 'Robert', 'Carol', 'Caroline'],
        'Email': ['ALICE@example.com', 'bob@example.com', 'carol@example.com', 'carol@example.com'],
    })
