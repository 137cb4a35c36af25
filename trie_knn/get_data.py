from __future__ import annotations

import os
from typing import Any, List, Tuple

import duckdb


CLEAN_FEATURES_SQL = "trim(regexp_replace(upper(CAST({col} AS VARCHAR)), '\\s+', ' ', 'g'))"

READERS = {
    ".csv": "read_csv_auto",
    ".tsv": "read_csv_auto",
    ".parquet": "read_parquet",
}


def _esc(s: str) -> str:
    # escape single quotes for safe SQL string literal embedding
    return s.replace("'", "''")


def _ident(s: str) -> str:
    return '"' + s.replace('"', '""') + '"'


def load_training_rows(
    path: str,
    *,
    features_col: str = "features",
    label_col: str = "label",
    clean: bool = True,
    connection: duckdb.DuckDBPyConnection | None = None,
) -> List[Tuple[str, Any]]:
    """Read (features, label) rows from a CSV or Parquet file.

    With clean=True the features are upper-cased, runs of whitespace are
    collapsed and the ends trimmed, all inside DuckDB.

    Example:
        >>> rows = load_training_rows("train.csv")
        >>> knn = build_classifier(rows)
    """
    ext = os.path.splitext(path)[1].lower()
    reader = READERS.get(ext)
    if reader is None:
        raise ValueError(f"unsupported training data file: {path!r}")

    features_sql = _ident(features_col)
    if clean:
        features_sql = CLEAN_FEATURES_SQL.format(col=features_sql)

    sql = f"""
        SELECT
            {features_sql} AS features,
            {_ident(label_col)} AS label
        FROM {reader}('{_esc(path)}')
        WHERE {_ident(features_col)} IS NOT NULL
    """
    return load_training_rows_from_sql(sql, connection=connection)


def load_training_rows_from_sql(
    sql: str,
    connection: duckdb.DuckDBPyConnection | None = None,
) -> List[Tuple[str, Any]]:
    """Run `sql` and return its first two columns as (features, label) rows."""
    con = connection or duckdb.connect(":default:")
    return [(row[0], row[1]) for row in con.sql(sql).fetchall()]
