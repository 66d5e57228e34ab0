"""Change identification and application for Playwright project scaffolding.

This package renders template assets, plans package-manager commands and
applies the resulting changes to a target directory, patching ``.gitignore``
and ``package.json`` in place instead of overwriting them.

Quick usage::

    from create_playwright.scaffolder import AssetLoader, identify_changes

    loader = AssetLoader(assets_dir)
    changes = identify_changes(answers, facts, package_manager, loader, options)
    await write_all(root_dir, changes.files)
"""

from create_playwright.scaffolder.changes import ChangeSet, identify_changes, inspect_environment
from create_playwright.scaffolder.engine import AssetLoader, render
from create_playwright.scaffolder.files import FileMap, write_all
from create_playwright.scaffolder.models import (
    Answers,
    Command,
    CommandPlan,
    EnvironmentFacts,
    Options,
    Phase,
    SectionState,
)
from create_playwright.scaffolder.patches import patch_ignore_file, patch_manifest
from create_playwright.scaffolder.planner import execute_commands, plan_commands

__all__ = [
    "Answers",
    "AssetLoader",
    "ChangeSet",
    "Command",
    "CommandPlan",
    "EnvironmentFacts",
    "FileMap",
    "Options",
    "Phase",
    "SectionState",
    "execute_commands",
    "identify_changes",
    "patch_ignore_file",
    "patch_manifest",
    "plan_commands",
    "inspect_environment",
    "render",
    "write_all",
]
