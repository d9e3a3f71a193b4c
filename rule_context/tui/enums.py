from enum import Enum

from rule_context.errors import DanglingReferenceError, ReferenceCycleError


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


DIAGNOSTIC_STYLE = {
    DanglingReferenceError: UIStyle.YELLOW.value,
    ReferenceCycleError: UIStyle.MAGENTA.value,
}
