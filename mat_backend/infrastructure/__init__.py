"""
Infrastructure layer - Adapters, repositories PostgreSQL et container DI.
"""
