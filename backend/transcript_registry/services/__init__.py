"""Services Layer — registry orchestration and persistence adapters.

Invariants:
    - Services call core/ pure functions and own all async IO around them
    - Routes reach the registry only through RegistryService

Design Decisions:
    - Repository implementation lives beside the service that uses it
"""
