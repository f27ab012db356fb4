"""
Pydantic schemas for API request validation.

Input models are registered by operation name in schemas/registry.py and
bound to routes through opsdesk.middleware.validation.validate().
"""
