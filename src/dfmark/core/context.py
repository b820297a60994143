"""Per-render state: the chain of files being processed"""

from dataclasses import dataclass, field, replace
from pathlib import Path

from dfmark.core.utils.paths import normalize, resolve_path


ENV_KEY = "dfm_context"


@dataclass(frozen=True)
class RenderContext:
    """Immutable file stack (outermost first) for one render call.

    Entering an included file produces a new context via push(); the parent's
    stack is untouched, so unwinding needs no bookkeeping. dependencies is the
    one shared, per-document collection of files read.
    """
    root:         Path
    file_stack:   tuple[str, ...] = ()
    encoding:     str = "utf-8"
    dependencies: set[str] = field(default_factory=set, compare=False)

    @classmethod
    def for_file(cls, root: Path, path: str, encoding: str = "utf-8") -> "RenderContext":
        return cls(root=Path(root), file_stack=(normalize(path),), encoding=encoding)

    @property
    def current_file(self) -> str | None:
        return self.file_stack[-1] if self.file_stack else None

    def push(self, path: str) -> "RenderContext":
        return replace(self, file_stack=self.file_stack + (normalize(path),))

    def contains(self, path: str) -> bool:
        return normalize(path) in self.file_stack

    def resolve(self, path: str) -> str:
        """Resolve a relative reference against the file currently on top of the stack."""
        return resolve_path(path, self.current_file)

    def locate(self, path: str) -> Path:
        """Map a resolved relative path to a file-system path under root."""
        return self.root / path

    def read_text(self, path: str) -> str:
        """Read a resolved relative path; FileNotFoundError propagates to the caller."""
        return self.locate(path).read_text(encoding=self.encoding)

    def record(self, path: str) -> None:
        self.dependencies.add(normalize(path))


def get_context(env) -> RenderContext:
    """Return the RenderContext stored in a markdown-it env, or raise KeyError."""
    try:
        return env[ENV_KEY]
    except (KeyError, TypeError):
        raise KeyError("render env has no RenderContext; render through dfmark.core.pipeline") from None


def make_env(context: RenderContext) -> dict:
    return {ENV_KEY: context}
