"""Health subsystem — status record and file publisher."""

from .models import NEVER, HealthStatus
from .publisher import HEALTHY, UNHEALTHY, HealthPublisher
