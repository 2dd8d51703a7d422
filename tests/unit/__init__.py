"""
Unit tests for the Reply Qualification Service.

Test individual components in isolation:
- Key service client and credential resolver (httpx mock transport)
- Runs service client and run bookkeeping
- Prompt builder, text utilities, pricing, Anthropic client
- Response parser, invoker and qualification service
- Repository (in-memory SQLite) and API helpers
"""
