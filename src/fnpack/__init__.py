from .pipeline import package
from .loader import load_function, FunctionHandle
from .config import read_config, update_config
from .model import FunctionConfig, StepDescriptor, DockerRuntime

__all__ = [
    "package",
    "load_function",
    "FunctionHandle",
    "read_config",
    "update_config",
    "FunctionConfig",
    "StepDescriptor",
    "DockerRuntime",
]
