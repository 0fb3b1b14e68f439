from ingestion.columns import COLUMN_RULES, ColumnMap, infer_columns
from ingestion.engine import ingest, parse_csv, row_to_transaction
from ingestion.normalizers import normalize_amount, normalize_date
from ingestion.tokenizer import split_line

__all__ = [
    "COLUMN_RULES",
    "ColumnMap",
    "infer_columns",
    "ingest",
    "parse_csv",
    "row_to_transaction",
    "normalize_amount",
    "normalize_date",
    "split_line",
]
