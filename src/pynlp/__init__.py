"""pynlp - scan coordination and location fusion for network-based positioning."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pynlp")
except PackageNotFoundError:
    __version__ = "0+local"
from pynlp.channel import EventChannel, NotificationChannel
from pynlp.config import ScanConfig
from pynlp.coordinator import Radio, SourceCoordinator
from pynlp.exceptions import (
    AlreadyOpenError,
    DegenerateWeightError,
    InvalidObservation,
    LifecycleError,
    MalformedAddress,
    NlpConfigError,
    NlpError,
    NotOpenError,
    ReentrancyError,
)
from pynlp.fusion import (
    FromEstimateWeight,
    Uniform,
    WeightPolicy,
    average,
    create_estimate,
    from_estimate_weight,
    fuse,
    uniform,
)
from pynlp.mac import normalize_mac
from pynlp.models import (
    Bluetooth,
    Cell,
    CellType,
    FusedLocation,
    LocationEstimate,
    SourceKind,
    WiFi,
)
from pynlp.service import LocationService
from pynlp.sources import (
    PassiveRadio,
    create_bluetooth_coordinator,
    create_cell_coordinator,
    create_wifi_coordinator,
)
from pynlp.state.cache import ScanCache
from pynlp.state.machine import ScanState, ScanStateMachine

__all__ = [
    "__version__",
    "AlreadyOpenError",
    "Bluetooth",
    "Cell",
    "CellType",
    "DegenerateWeightError",
    "EventChannel",
    "FromEstimateWeight",
    "FusedLocation",
    "InvalidObservation",
    "LifecycleError",
    "LocationEstimate",
    "LocationService",
    "MalformedAddress",
    "NlpConfigError",
    "NlpError",
    "NotOpenError",
    "NotificationChannel",
    "PassiveRadio",
    "Radio",
    "ReentrancyError",
    "ScanCache",
    "ScanConfig",
    "ScanState",
    "ScanStateMachine",
    "SourceCoordinator",
    "SourceKind",
    "Uniform",
    "WeightPolicy",
    "WiFi",
    "average",
    "create_bluetooth_coordinator",
    "create_cell_coordinator",
    "create_estimate",
    "create_wifi_coordinator",
    "from_estimate_weight",
    "fuse",
    "normalize_mac",
    "uniform",
]
