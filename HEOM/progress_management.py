# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

from rich import progress
from rich.progress import TaskID

# Progress reporters only observe the evolution, they never change it
class ProgressReporter:
    def start(self, total: int): ...

    def advance(self): ...

    def finish(self): ...

class NullProgressBar(ProgressReporter): ...

class RichProgressBar(ProgressReporter):
    description: str
    total: float = 0
    completed: float = 0
    taskID: TaskID | None = None

    _nextUpdate: float = 0

    def __init__(self, description: str = "Progress :", transient: bool = False):
        self.description = description
        self.transient = transient
        self._progress = None

    def start(self, total: int):
        self.total = total
        self.completed = 0
        self._nextUpdate = 0
        self._progress = progress.Progress("[progress.description]{task.description}",
                                           progress.BarColumn(),
                                           "[progress.percentage]{task.percentage:>3.0f}%",
                                           progress.TimeRemainingColumn(),
                                           progress.TimeElapsedColumn(),
                                           refresh_per_second=10,
                                           transient=self.transient)
        self._progress.start()
        self.taskID = self._progress.add_task(self.description, total=total)

    def advance(self):
        if self._progress is None: return
        self.completed += 1
        # Redraw at most once per percent
        if self.completed >= self._nextUpdate:
            self._nextUpdate = min(self.completed + self.total * 0.01, self.total)
            self._progress.update(self.taskID, completed=self.completed)

    def finish(self):
        if self._progress is None: return
        self._progress.update(self.taskID, completed=self.completed)
        self._progress.stop()
        self._progress = None

def make_progress(verbose: bool, description: str = "Progress :") -> ProgressReporter:
    if verbose:
        return RichProgressBar(description)
    return NullProgressBar()
