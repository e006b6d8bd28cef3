"""tychobridge - async Python bridge to a native TVM transaction emulator."""

__version__ = "0.1.0"

from tychobridge.executor import TychoExecutor

__all__ = ["TychoExecutor", "__version__"]
