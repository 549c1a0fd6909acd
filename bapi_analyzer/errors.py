from __future__ import annotations
from typing import Optional


class AnalyzerError(Exception):
    """Base class for every failure raised while producing a search report."""


class ParseError(AnalyzerError):
    pass


class AnalysisError(AnalyzerError):
    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path is not None:
            message = f"{message} (at path '{path}')"
        super().__init__(message)


class SourceError(AnalyzerError):
    pass


class SourceNotFoundError(SourceError):
    pass


class SourceIsDirectoryError(SourceError):
    pass


class SourceOutsideRootError(SourceError):
    pass
