"""
Measure-code dictionary lookups for the regional statistics dataset.

The dictionary maps short measure codes (column names of the regional
dataset) to a description and a unit. It is used to find which columns to
read, never for computation.
"""
from __future__ import annotations

from typing import Dict

import pandas as pd

from .dataset_connection import DatasetHandle, open_dataset

DICTIONARY_COLUMNS = ["code", "description", "unit"]


def load_measure_dictionary(address: str, *, handle: DatasetHandle | None = None) -> pd.DataFrame:
    """
    Load the measure dictionary (Parquet or CSV).

    When ``handle`` is given its connection is reused for the read.
    """
    if address.lower().endswith(".csv"):
        dictionary = pd.read_csv(address, dtype=str)
    else:
        con = handle.connection if handle is not None else None
        dictionary_handle = open_dataset(address, view_name="measure_dictionary", con=con)
        try:
            dictionary = dictionary_handle.query(f"SELECT * FROM {dictionary_handle.view}")
        finally:
            if handle is None:
                dictionary_handle.close()

    dictionary.columns = [str(c).lower() for c in dictionary.columns]
    missing = [c for c in DICTIONARY_COLUMNS if c not in dictionary.columns]
    if missing:
        raise ValueError(f"Measure dictionary is missing columns: {missing}")

    print(f"   📋 Loaded {len(dictionary)} measure codes")
    return dictionary[DICTIONARY_COLUMNS].reset_index(drop=True)


def lookup_measures(dictionary: pd.DataFrame, keyword: str, field: str = "description") -> pd.DataFrame:
    """Dictionary rows whose ``field`` contains ``keyword`` (case-insensitive, literal match)."""
    mask = dictionary[field].astype(str).str.contains(keyword, case=False, regex=False, na=False)
    return dictionary[mask].reset_index(drop=True)


def describe_measure(dictionary: pd.DataFrame, code: str) -> Dict[str, str]:
    matches = dictionary[dictionary["code"].str.lower() == code.lower()]
    if matches.empty:
        raise KeyError(f"Unknown measure code: {code}")
    return matches.iloc[0].to_dict()
