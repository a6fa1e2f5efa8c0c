"""
Integration tests for the telemetry monitor.

This package contains tests that exercise the real reassessment loop and
concurrent ingestion against the shared reading store.

Test Categories:
- Liveness timing: online/offline transitions under the asyncio loop
- Concurrent ingestion: bounded history under parallel writers
"""
