"""
Reporting: turn scoring results into plain data for files and the CLI.

Modules
-------
export : result_to_dict() + weekly_to_rows() — flat, JSON-safe shapes;
         export_to_json() + export_to_csv() — file output.
"""
