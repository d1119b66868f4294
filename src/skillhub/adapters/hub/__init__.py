from .local_store import LocalHubStore, validate_skill_id

__all__ = ["LocalHubStore", "validate_skill_id"]
