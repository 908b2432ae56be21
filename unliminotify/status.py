"""Console status lines in the "Doing something... OK" style."""

from contextlib import contextmanager


@contextmanager
def stage(message: str):
    """
    Print a stage prefix, then OK when the block completes or ERROR when it raises

    The exception is never swallowed.
    """
    print(f"{message}... ", end="", flush=True)
    try:
        yield
    except BaseException:
        print("ERROR", flush=True)
        raise
    print("OK", flush=True)
