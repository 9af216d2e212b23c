from toolexec.common import config
from toolexec.common import dto
from toolexec.common import exceptions
from toolexec.common import utils
from toolexec import builder

__version__ = "1.0.0"
__all__ = [
    "config",
    "dto",
    "exceptions",
    "utils",
    "builder",
]
