"""Source file ingestion.

This package parses delimited, spreadsheet, JSON-table, and fixed-schema
XML files into uniform records for the dataset registry.
"""
