from .core.runner import BatchRunner
from .core.partition import partition
from .core.cancellation import CancellationToken, is_cancellation_requested
from .core.errors import TaskBatchError, InvalidArgumentError
from .core.hooks import BatchHooks
from .core.log import get_logger
from .config import Config, RunnerSettings, load_config, runner_settings

__all__ = [
    "BatchRunner",
    "partition",
    "CancellationToken",
    "is_cancellation_requested",
    "TaskBatchError",
    "InvalidArgumentError",
    "BatchHooks",
    "get_logger",
    "Config",
    "RunnerSettings",
    "load_config",
    "runner_settings",
]

__version__ = "0.1.0"
