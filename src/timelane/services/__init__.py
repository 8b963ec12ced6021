"""Service layer. Orchestrates domain logic over the item store.

Every CLI-facing service method returns a ServiceResult.
"""
