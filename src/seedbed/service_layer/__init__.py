"""Service layer for SEEDBED.

Implements the bootstrap use-cases: readiness polling, collection migration,
seeding and database provisioning, each bounded by a `Deadline`. Talks to the
database only through the ports in `seedbed.interfaces`.

Dependency rule: may import `seedbed.domain` and `seedbed.interfaces`, but not
`seedbed.adapters`, `seedbed.harness` or `seedbed.bootstrap`.
"""

from .deadline import Deadline, run_with_deadline
from .migrator import SchemaMigrator
from .provisioner import DatabaseProvisioner
from .readiness import ConnectionStatusChecker, ReadinessResult, backoff_delay
from .seeder import Seeder

__all__ = [
    "ConnectionStatusChecker",
    "DatabaseProvisioner",
    "Deadline",
    "ReadinessResult",
    "SchemaMigrator",
    "Seeder",
    "backoff_delay",
    "run_with_deadline",
]
