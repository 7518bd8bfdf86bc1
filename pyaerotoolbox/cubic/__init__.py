from .cubic import solve_cubic, NEG_ROOT_SENTINEL
