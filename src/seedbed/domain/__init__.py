"""Domain layer for SEEDBED.

Holds the value objects the bootstrap sequence is expressed in (collection
specs, seed batches, harness states), the deadline primitive, and the error
taxonomy. This package is deliberately technology-agnostic.

Dependency rule: do not import from `seedbed.adapters` or `seedbed.bootstrap`.
"""
