# Namespace for pipeline steps
from .acquire_token import AcquireToken  # noqa: F401
from .fetch_roster import FetchRoster  # noqa: F401
from .join_drivers import JoinDrivers  # noqa: F401
from .persist_drivers import PersistDrivers  # noqa: F401
