"""
Forge Schemas Package
Request/response schemas for the API and the derived analytics models.
"""
