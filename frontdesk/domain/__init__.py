"""
Domain-driven design structure
Each domain contains: router, service, repository, schemas
"""
