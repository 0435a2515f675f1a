"""Operations: every public entry point that reads or changes the trees."""

from ._clean import clean
from ._init import init
from ._new_set import compute_shortcut, new_set
from ._pull import pull
from ._push import push
from ._put import fix, put
from ._status import local_status
from ._types import (
    CleanMode,
    CleanResult,
    InitResult,
    InitSpec,
    NewSetResult,
    PullResult,
    PushResult,
    PutResult,
    SetFiles,
    Status,
)

__all__ = [
    "clean",
    "compute_shortcut",
    "fix",
    "init",
    "local_status",
    "new_set",
    "pull",
    "push",
    "put",
    "CleanMode",
    "CleanResult",
    "InitResult",
    "InitSpec",
    "NewSetResult",
    "PullResult",
    "PushResult",
    "PutResult",
    "SetFiles",
    "Status",
]
