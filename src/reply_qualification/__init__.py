"""
Reply Qualification Service.

Classifies replies to outreach emails with an Anthropic model:
- Resolves the upstream credential (platform, BYOK org key, or app key)
- Invokes the classifier and normalizes its JSON judgement
- Records token cost against the runs service
- Persists requests and qualifications for listing and stats

Architecture: FastAPI + key-service / runs-service HTTP clients + SQLAlchemy
"""

__version__ = "0.1.0"
