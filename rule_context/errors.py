from pathlib import Path


class RuleContextError(Exception):
    """Base user-facing application error."""


class RuleFileError(RuleContextError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MalformedMetadataError(RuleFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Malformed metadata ({detail})")


class RuleReadError(RuleFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Cannot read rule ({detail})")


class DirectoryScanError(RuleContextError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidConfigError(RuleContextError):
    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config ({detail}): {path}")


class RuleNotFoundError(RuleContextError):
    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule not found: {rule_id}")


class ResolutionError(RuleContextError):
    """A reference that could not be substituted. Recorded, never raised."""

    def __init__(self, source_id: str, reference: str, message: str) -> None:
        self.source_id = source_id
        self.reference = reference
        self.message = message
        super().__init__(f"{message}: {source_id} -> {reference}")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash((type(self).__name__, str(self)))


class DanglingReferenceError(ResolutionError):
    def __init__(self, source_id: str, reference: str) -> None:
        super().__init__(source_id, reference, "Dangling reference")


class ReferenceCycleError(ResolutionError):
    def __init__(self, source_id: str, reference: str, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__(source_id, reference, "Reference cycle")

    def __str__(self) -> str:
        return f"Reference cycle: {' -> '.join((*self.chain, self.reference))}"
