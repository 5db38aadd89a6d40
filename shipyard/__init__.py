"""
Shipyard

This package contains the backend of a multi-tenant container hosting
console: user accounts, organizations, applications and their deployments,
exposed to the browser client through a GraphQL API.
"""

__version__ = "1.0.0"
