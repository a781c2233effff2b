"""Fixtures for toolpack unit tests: sample projects and a fake compiler."""

import json
import threading
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest


class FakeCompiler:
    """Stands in for tsc.

    Writes "<stem>.js" for every input file into out_dir and returns the
    configured status. Optionally blocks until released or terminated, to
    exercise cancellation.
    """

    def __init__(self, status: int = 0, block: bool = False):
        self.status = status
        self.block = block
        self.calls: list[tuple[list[Path], list[str], Path]] = []
        self.terminated = threading.Event()
        self.release = threading.Event()

    def compile(self, files: Sequence[Path], flags: Sequence[str], out_dir: Path) -> int:
        self.calls.append((list(files), list(flags), out_dir))
        if self.block:
            self.release.wait(timeout=10)
            if self.terminated.is_set():
                return -15
        if self.status == 0:
            for f in files:
                (out_dir / f"{f.stem}.js").write_text(f"// compiled from {f.name}\n", encoding="utf-8")
        return self.status

    def terminate(self) -> None:
        self.terminated.set()
        self.release.set()


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def make_project(tmp_path) -> Callable[..., Path]:
    """Factory creating a minimal tool project under tmp_path.

    Layout:
        <name>/src/index.ts
        <name>/package.json   {"name": ..., "version": ...}
        <name>/README.md      (unless readme=False)
    """

    def _make(
        name: str = "demo",
        version: str = "1.0.0",
        readme: bool = True,
        manifest: Optional[dict] = None,
        folder: str = "project",
    ) -> Path:
        root = tmp_path / folder
        src = root / "src"
        src.mkdir(parents=True)
        (src / "index.ts").write_text("export function hello(): string {\n\treturn 'hi';\n}\n", encoding="utf-8")

        data = manifest if manifest is not None else {"name": name, "version": version}
        (root / "package.json").write_text(json.dumps(data, indent="\t") + "\n", encoding="utf-8")
        if readme:
            (root / "README.md").write_text(f"# {name}\n", encoding="utf-8")
        return root

    return _make


@pytest.fixture
def scratch_dir(tmp_path) -> Path:
    """Private temp root so tests can assert nothing is left behind."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path
