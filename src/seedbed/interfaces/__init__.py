"""Interfaces (application boundary) for SEEDBED.

Defines framework-free contracts: ABCs and small DTOs shared by the service
layer, the harness and the adapters (database clients, instance managers,
key lookup, clocks, ID generators, redactors).

Dependency rule: this package may import `seedbed.domain` only. It is imported
by `seedbed.service_layer`, `seedbed.harness`, `seedbed.adapters` and
`seedbed.bootstrap`.
"""
