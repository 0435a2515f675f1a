from .profile import ExecutionOptions, Profile, ProfileConfig
from .paths import AbsolutePath, LocalFilePath, SetShortcut
from .exceptions import MonjaError
from .operation import pull, push, put, fix, clean, local_status, init, new_set, compute_shortcut
from .operation import (
    CleanMode, CleanResult, InitResult, InitSpec, NewSetResult,
    PullResult, PushResult, PutResult, Status,
)

__all__ = [
    "ExecutionOptions", "Profile", "ProfileConfig",
    "AbsolutePath", "LocalFilePath", "SetShortcut", "MonjaError",
    "pull", "push", "put", "fix", "clean", "local_status", "init", "new_set",
    "compute_shortcut",
    "CleanMode", "CleanResult", "InitResult", "InitSpec", "NewSetResult",
    "PullResult", "PushResult", "PutResult", "Status",
]
