"""
Kumo – Infrastructure Layer
===========================
- external/: Kraken REST and WebSocket clients, wire format
- messaging/: in-process event bus
"""
