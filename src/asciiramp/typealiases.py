from typing import Union, Optional
from os import PathLike
from pathlib import Path

SomeSortOfPath = Union[str, PathLike, Path]
Number = Union[int, float]
Color = Union[str, int, tuple[int, int, int], tuple[int, int, int, int]]
OptionalColor = Optional[Color]
Sample = tuple[int, int, float, int]


class AsciirampException(Exception):
    """Base class for every asciiramp failure. Carries the source path and frame index when known."""

    def __init__(self, message: str, path: Optional[SomeSortOfPath] = None, frame: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = None if path is None else str(path)
        self.frame = frame

    def __str__(self) -> str:
        context = []
        if self.path is not None:
            context.append(f'path \'{self.path}\'')
        if self.frame is not None:
            context.append(f'frame {self.frame}')
        if context:
            return f'{self.message} ({", ".join(context)})'
        return self.message


class DecodeError(AsciirampException):
    pass


class ZeroDimensionError(AsciirampException):
    pass


class ExtractionError(AsciirampException):
    pass


class EncodingError(AsciirampException):
    pass


class WriteError(AsciirampException):
    pass
