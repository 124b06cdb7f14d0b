"""Ingest — delimited text → raw rows → Reading records."""
