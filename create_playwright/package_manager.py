"""Shell command builders for npm, Yarn and pnpm.

Every method returns a ready-to-run shell string; nothing here executes
anything.  :func:`determine_package_manager` picks the manager that launched
the tool, falling back to npm.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from create_playwright.scaffolder.patches import Manifest


class PackageManager(Protocol):
    """Capabilities the scaffolder needs from a package manager."""

    name: str
    cli: str

    def init(self) -> str: ...

    def npx(self, command: str, args: str) -> str: ...

    def ci(self) -> str: ...

    def i(self) -> str: ...

    def install_dev_dependency(self, name: str) -> str: ...

    def run_playwright_test(self, args: str = "") -> str: ...

    def run(self, script: str) -> str: ...


def _test_args(args: str) -> str:
    return f"test {args}" if args else "test"


class NPM:
    name = "NPM"
    cli = "npm"

    def init(self) -> str:
        return "npm init -y"

    def npx(self, command: str, args: str) -> str:
        return f"npx {command} {args}"

    def ci(self) -> str:
        return "npm ci"

    def i(self) -> str:
        return "npm i"

    def install_dev_dependency(self, name: str) -> str:
        return f"npm install --save-dev {name}"

    def run_playwright_test(self, args: str = "") -> str:
        return self.npx("playwright", _test_args(args))

    def run(self, script: str) -> str:
        return f"npm run {script}"


class Yarn:
    name = "Yarn"
    cli = "yarn"

    def __init__(self, root_dir: str | Path) -> None:
        self.workspace = _declares_workspaces(Path(root_dir))

    def init(self) -> str:
        return "yarn init -y"

    def npx(self, command: str, args: str) -> str:
        return f"yarn {command} {args}"

    def ci(self) -> str:
        return "npm install -g yarn && yarn"

    def i(self) -> str:
        return self.ci()

    def install_dev_dependency(self, name: str) -> str:
        flag = "-W " if self.workspace else ""
        return f"yarn add --dev {flag}{name}"

    def run_playwright_test(self, args: str = "") -> str:
        return self.npx("playwright", _test_args(args))

    def run(self, script: str) -> str:
        return f"yarn {script}"


class PNPM:
    name = "pnpm"
    cli = "pnpm"

    def __init__(self, root_dir: str | Path) -> None:
        self.workspace = (Path(root_dir) / "pnpm-workspace.yaml").exists()

    def init(self) -> str:
        return "pnpm init"

    def npx(self, command: str, args: str) -> str:
        return f"pnpm exec {command} {args}"

    def ci(self) -> str:
        return "npm install -g pnpm && pnpm install"

    def i(self) -> str:
        return self.ci()

    def install_dev_dependency(self, name: str) -> str:
        flag = "-w " if self.workspace else ""
        return f"pnpm add --save-dev {flag}{name}"

    def run_playwright_test(self, args: str = "") -> str:
        return self.npx("playwright", _test_args(args))

    def run(self, script: str) -> str:
        return f"pnpm run {script}"


def determine_package_manager(
    root_dir: str | Path, user_agent: str | None = None
) -> PackageManager:
    """Pick the package manager from ``npm_config_user_agent``.

    Args:
        root_dir: Target project directory (used for workspace detection).
        user_agent: Override for the environment variable.
    """
    if user_agent is None:
        user_agent = os.environ.get("npm_config_user_agent", "")
    if "yarn" in user_agent:
        return Yarn(root_dir)
    if "pnpm" in user_agent:
        return PNPM(root_dir)
    return NPM()


def _declares_workspaces(root_dir: Path) -> bool:
    manifest = Manifest.load(root_dir / "package.json")
    return manifest is not None and bool(manifest.data.get("workspaces"))

