"""
Kumo – Application Layer
========================
Use cases (ingest, backfill, signal query, order flow, status dump) and the
ports they depend on.
"""
