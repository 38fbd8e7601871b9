"""Dependency resolution from POM files alone, used when ``mvn`` cannot run."""

from __future__ import annotations

import os
from collections.abc import Container

from depsleuth.common import use_logger
from depsleuth.maven.deps import DepsMap
from depsleuth.maven.deptree import build_dep_tree
from depsleuth.maven.local_project import read_local_project
from depsleuth.maven.repo import HttpRepo, LocalRepo
from depsleuth.maven.resolver import PomResolver
from depsleuth.maven.settings import get_mvn_config


def prepare_resolver(maven_central: str = "") -> PomResolver:
    """Return a resolver over the local repository and the configured mirrors."""
    logger = use_logger()
    config = get_mvn_config(maven_central)
    logger.info("User maven config: %s", config)
    resolver = PomResolver()
    if config.repo:
        resolver.add_repo(LocalRepo(config.repo))
        logger.debug("Add local repo: %s", config.repo)
    for remote in config.remotes:
        try:
            repo = HttpRepo(remote)
        except ValueError as e:
            logger.warning("Parse url failed: %s: %s", remote, e)
            continue
        resolver.add_repo(repo)
        logger.debug("Add http repo: %s", repo)
    return resolver


def backup_resolve(
    project_dir: str | os.PathLike, scopes: Container[str], maven_central: str = ""
) -> DepsMap:
    """Build the dependency tree of every module of the project in ``project_dir``."""
    logger = use_logger()
    project_dir = os.fspath(project_dir)
    logger.info("Backup scan: %s", project_dir)
    resolver = prepare_resolver(maven_central)
    poms = read_local_project(project_dir)
    logger.info("Found %d pom file", len(poms))
    for pom in poms:
        resolver.pom_cache.add(pom)
    result = DepsMap()
    for pom in poms:
        coordinate = pom.coordinate()
        if not coordinate.complete():
            logger.warning("Incomplete coordinate, skip: %s", coordinate)
            continue
        logger.info("Build dependency tree: %s", coordinate)
        tree = build_dep_tree(resolver, coordinate, scopes)
        try:
            rel = os.path.relpath(pom.path, project_dir)
        except ValueError as e:
            logger.warning("Calculate relative-path failed: %s: %s", pom.path, e)
            rel = ""
        result.put(coordinate, tree.children, rel)
    return result