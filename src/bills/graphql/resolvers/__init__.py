"""Resolver package for the GraphQL schema.

Each function reads the entity store from the execution context and converts
store records into GraphQL types.
"""

# Intentionally empty; functions are defined in sibling modules.
