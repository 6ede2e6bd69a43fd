from .contracts import SinkMeta, get_sink_meta, sink
from .host import LocalHost
from .registry import SinkRegistry, SinkRegistryError

__all__ = [
    "LocalHost",
    "SinkMeta",
    "SinkRegistry",
    "SinkRegistryError",
    "get_sink_meta",
    "sink",
]
