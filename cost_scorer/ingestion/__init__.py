"""
Ingestion boundary: raw files → validated ``OperationalRecords``.

Modules
-------
records_json : load_operational_records() — JSON document with one list per
               record stream plus an optional inventory adjustment.
"""
