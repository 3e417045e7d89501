"""
DuckDB connection helper for remote Parquet datasets.

- Opens an in-memory DuckDB connection and exposes a Parquet object as a view.
- Loads httpfs only when the address points at object storage or HTTP.
- Minimal implementation; no retry, pooling or caching. A bad address fails
  when the view is bound.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import duckdb
import pandas as pd

from . import settings

REMOTE_PREFIXES = ("s3://", "gs://", "gcs://", "http://", "https://", "r2://")


def is_remote_address(address: str) -> bool:
    return address.lower().startswith(REMOTE_PREFIXES)


def quote_identifier(name: str) -> str:
    """Quote a column/view name for use in DuckDB SQL."""
    return '"' + str(name).replace('"', '""') + '"'


@dataclass
class DatasetHandle:
    """Queryable handle over one Parquet dataset exposed as a DuckDB view."""

    connection: duckdb.DuckDBPyConnection
    address: str
    view_name: str = "dataset"

    @property
    def view(self) -> str:
        return quote_identifier(self.view_name)

    def columns(self) -> List[str]:
        described = self.connection.execute(f"DESCRIBE SELECT * FROM {self.view}").fetchall()
        return [row[0] for row in described]

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> pd.DataFrame:
        """Run SQL against the connection and materialize the result."""
        if params:
            return self.connection.execute(sql, list(params)).fetchdf()
        return self.connection.execute(sql).fetchdf()

    def close(self) -> None:
        self.connection.close()


def _set_option(con: duckdb.DuckDBPyConnection, name: str, value: str) -> None:
    literal = str(value).replace("'", "''")
    con.execute(f"SET {name}='{literal}';")


def _configure_object_storage(con: duckdb.DuckDBPyConnection) -> None:
    con.execute("INSTALL httpfs; LOAD httpfs;")
    _set_option(con, "s3_region", settings.S3_REGION)

    # Configure credentials if they exist, otherwise stay anonymous (public buckets)
    if (ak := os.getenv("AWS_ACCESS_KEY_ID")) and (sk := os.getenv("AWS_SECRET_ACCESS_KEY")):
        _set_option(con, "s3_access_key_id", ak)
        _set_option(con, "s3_secret_access_key", sk)
        if endpoint := os.getenv("S3_ENDPOINT"):
            _set_option(con, "s3_endpoint", endpoint)
            _set_option(con, "s3_url_style", "path")


def open_dataset(
    address: str,
    *,
    view_name: str = "dataset",
    con: Optional[duckdb.DuckDBPyConnection] = None,
) -> DatasetHandle:
    """
    Open a handle to a (remote) Parquet dataset.

    Args:
        address: Storage location, e.g. ``s3://bucket/key/data.parquet`` or a local path.
            Globs accepted by ``read_parquet`` work too.
        view_name: Name of the view created over the dataset.
        con: Existing connection to reuse (another dataset may already be attached).

    Returns:
        DatasetHandle bound to the new view.

    Raises:
        ValueError: If the address is empty.
        duckdb.Error: If the store is unreachable or the object is not Parquet.
    """
    if not address or not address.strip():
        raise ValueError("Dataset address must be a non-empty string")

    conn = con if con is not None else duckdb.connect(database=":memory:")
    if is_remote_address(address):
        _configure_object_storage(conn)

    print(f"📥 Opening dataset: {address}")
    # Literal path is required here; read_parquet does not take a bound parameter in DDL
    literal = address.replace("'", "''")
    conn.execute(
        f"CREATE OR REPLACE VIEW {quote_identifier(view_name)} AS "
        f"SELECT * FROM read_parquet('{literal}')"
    )
    handle = DatasetHandle(connection=conn, address=address, view_name=view_name)
    print(f"✅ Dataset view '{view_name}' ready ({len(handle.columns())} columns)")
    return handle
