from typing import Any, Optional, Tuple, Callable, Iterable, Iterator, NoReturn
from collections import deque
from concurrent.futures import ProcessPoolExecutor
import subprocess
import os
import sys
import warnings


def run(executable: str, *args: str, get_stderr=False) -> Tuple[int, str]:
    """Run a system command."""
    process = subprocess.run([executable, *args], text=True, capture_output=True)
    if get_stderr:
        return process.returncode, process.stderr.strip('\n')
    return process.returncode, process.stdout.strip('\n')


def multiprocessing_guard() -> Optional[NoReturn]:
    """Ensure that the top-level script has a 'if __name__ == "__main__"' check."""
    if int(os.environ.get('ASCIIRAMP_PROCESS', '0')):
        warnings.warn(
            '\nAn asciiramp function is being repeatedly called when helper processes are spawned.\n'
            'This can be solved by adding a \'if __name__ == "__main__"\' check in the entry point of your code.\n'
            'Example:\n\nimport asciiramp as ar\n\nif __name__ == "__main__":\n'
            '    ar.video.asciify("foo.mp4", "out", workers=4)\n',
            RuntimeWarning)
        sys.exit()
    os.environ['ASCIIRAMP_PROCESS'] = '1'


def release_guard() -> None:
    os.environ['ASCIIRAMP_PROCESS'] = '0'


def conditional_print(quiet: bool) -> Callable:
    """Return a conditional print function."""
    def _print(*values: Any, end: str = '\n'):
        if not quiet:
            print(*values, end=end)
    return _print


def ordered_map(func: Callable, jobs: Iterable[Tuple[Any, ...]], workers: Optional[int] = None) -> Iterator[Any]:
    """Apply ``func`` to every argument tuple in ``jobs`` and yield the results in submission order.

    With ``workers`` greater than one the calls run in a ``ProcessPoolExecutor``, but never more than
    ``2 * workers`` jobs are in flight, so a long sequence of frames is not all held in memory at once.
    Results are reordered on completion: the n-th result yielded always belongs to the n-th job.
    """
    if workers is None or workers <= 1:
        for args in jobs:
            yield func(*args)
        return

    with ProcessPoolExecutor(max_workers=workers) as executor:
        pending = deque()
        try:
            for args in jobs:
                pending.append(executor.submit(func, *args))
                if len(pending) >= workers * 2:
                    yield pending.popleft().result()
            while pending:
                yield pending.popleft().result()
        except BaseException:
            # Queued jobs after a failure are dropped, not run.
            executor.shutdown(wait=True, cancel_futures=True)
            raise
