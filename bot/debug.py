import os

# -------------------- Debug Mode --------------------
DEBUG_MODE = os.getenv("DEBUG_MODE", "none").lower()  # 'none', 'some', 'all'


def debug_print(*args, level="some", **kwargs):
    """
    Print debug output based on DEBUG_MODE:
    - 'none': no debug output
    - 'some': prints all debug_prints except those with level='all'
    - 'all': prints all debug_prints
    """
    if DEBUG_MODE == "none":
        return
    if DEBUG_MODE == "some" and level == "all":
        return
    print("[DEBUG]", *args, **kwargs)
