import shutil
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from config_loader import KitSettings

ROOT = Path(__file__).parent.parent
TEMPLATE = ROOT / "samples" / "standalone.yml"


@dataclass
class FakeHost:
    memory: int = 4000
    swap: int = 2048
    disk: int = 50000
    bound: set = field(default_factory=set)
    cores: int = 2
    root: bool = True
    interactive: bool = False
    calls: list = field(default_factory=list)

    def total_memory(self):
        self.calls.append("total_memory")
        return self.memory

    def total_swap(self):
        self.calls.append("total_swap")
        return self.swap

    def free_disk(self, path="/var"):
        self.calls.append("free_disk")
        return self.disk

    def is_port_bound(self, port):
        self.calls.append(f"port:{port}")
        return port in self.bound

    def physical_core_count(self):
        return self.cores

    def is_root(self):
        self.calls.append("is_root")
        return self.root

    def is_interactive(self):
        return self.interactive


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def template_text():
    return TEMPLATE.read_text()


@pytest.fixture
def kit(tmp_path):
    """A docker checkout with the sample template and a no-op launcher."""
    (tmp_path / "samples").mkdir()
    shutil.copyfile(TEMPLATE, tmp_path / "samples" / "standalone.yml")
    launcher = tmp_path / "launcher"
    launcher.write_text("#!/bin/sh\necho \"$@\" > launcher.args\nexit 0\n")
    launcher.chmod(0o755)
    return KitSettings(root=tmp_path)


@pytest.fixture
def answers(monkeypatch):
    """Feed successive lines to input(); returns the list of prompts shown."""
    prompts = []

    def feed(*lines):
        it = iter(lines)

        def fake_input(prompt=""):
            prompts.append(prompt)
            return next(it)

        monkeypatch.setattr("builtins.input", fake_input)
        return prompts

    return feed
