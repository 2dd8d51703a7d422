"""
Integration tests for the Reply Qualification Service.

Drive the FastAPI app end to end (httpx ASGITransport) with the key service,
runs service and classification provider replaced in-process and an
in-memory SQLite database.
"""
