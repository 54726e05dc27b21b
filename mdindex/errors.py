from __future__ import annotations


class MdIndexError(Exception):
    pass


class InvalidManifest(MdIndexError):
    pass


class DuplicatePost(InvalidManifest):
    def __init__(self, file: str, first: int, second: int) -> None:
        super().__init__(f"Duplicate post file {file!r} at manifest positions {first} and {second}")
        self.file = file
        self.positions = (first, second)


class FetchFailure(MdIndexError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Could not fetch {source}: {reason}")
        self.source = source
        self.reason = reason


class PostNotFound(MdIndexError):
    def __init__(self, file: str) -> None:
        super().__init__(f"Post not found: {file}")
        self.file = file
