from .repos import DriversRepoPort, DriverWriterPort
from .source import DispatcherSourcePort, DriverSourcePort, TokenProviderPort

__all__ = [
    "DriversRepoPort",
    "DriverWriterPort",
    "DispatcherSourcePort",
    "DriverSourcePort",
    "TokenProviderPort",
]
