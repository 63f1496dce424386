"""DuckDB persistence for market snapshots and the trade ledger."""
