"""
Kumo – Presentation Layer
=========================
HTTP API polled by the dashboard.
"""
