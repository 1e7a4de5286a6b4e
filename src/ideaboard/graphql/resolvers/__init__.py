"""Resolver package for the GraphQL schema.

Root query, mutation and subscription fields import their resolvers from
the sibling modules lazily to keep type modules free of database imports.
"""
