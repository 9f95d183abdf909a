from paladin.config import PaladinConfig
from paladin.coordinator import Paladin, Closeable, Opener, Closer, Runner
from paladin.errors import PaladinError, AcquisitionError, ReleaseError, ProtocolError
from paladin.events import Event, Interrupted, TaskFinished
from paladin.guard import Guard

__version__ = "0.1.0"
