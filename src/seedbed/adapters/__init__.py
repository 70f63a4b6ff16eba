"""Adapters (infrastructure) for SEEDBED.

Concrete implementations of the ports in `seedbed.interfaces`: the
python-arango database client, testcontainers-backed and attached instance
managers, ID generators and the regex redactor.

Dependency rule: may import `seedbed.domain` and `seedbed.interfaces`; neither
of those may import this package.
"""
