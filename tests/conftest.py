"""
Shared fixtures for the pl0c test suite.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from pl0c.compiler import compile_pl0


def _find_c_compiler():
    for name in ("cc", "gcc", "clang"):
        path = shutil.which(name)
        if path:
            return path
    return None


@pytest.fixture
def run_pl0(tmp_path):
    """
    Compile PL/0 source to C, build it with the system C compiler and
    return a function that runs the program.

    Tests using this fixture are skipped when no C compiler is installed.
    """
    cc = _find_c_compiler()
    if cc is None:
        pytest.skip("no C compiler available")

    def build_and_run(source: str, stdin: str = "") -> subprocess.CompletedProcess:
        c_file = tmp_path / "prog.c"
        exe = tmp_path / "prog"
        c_file.write_text(compile_pl0(source))
        subprocess.run([cc, "-o", str(exe), str(c_file)], check=True, capture_output=True)
        return subprocess.run(
            [str(exe)],
            input=stdin,
            capture_output=True,
            text=True,
            timeout=10,
        )

    return build_and_run


@pytest.fixture
def source_file(tmp_path):
    """Write PL/0 source to a file in a temporary directory."""

    def write(source: str, name: str = "prog.pl0") -> Path:
        path = tmp_path / name
        path.write_text(source)
        return path

    return write
