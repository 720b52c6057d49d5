"""SQLAlchemy ORM models backing the process engine."""

from ddworkflow.models.base import Base  # noqa: F401
from ddworkflow.models.deployment import Deployment, DeploymentResource, ProcessDefinition  # noqa: F401
from ddworkflow.models.process_instance import ProcessInstance  # noqa: F401
