"""External commands: project scaffold generator and package installation."""

from __future__ import annotations

import subprocess

import structlog

from scaffold_migrator.config import MigrationSettings
from scaffold_migrator.exceptions import ExternalCommandError

log = structlog.get_logger("scaffold_migrator.process")


def run_scaffold(settings: MigrationSettings) -> None:
    """Generate the destination project and wait for the generator to exit.

    Output is streamed to this process's stdout.
    """
    cmd = settings.scaffold_argv()
    log.info("process.scaffold_started", cmd=cmd)
    try:
        subprocess.run(cmd, check=True, cwd=settings.source_root.parent)
    except FileNotFoundError as e:
        raise ExternalCommandError(cmd, None, str(e)) from e
    except subprocess.CalledProcessError as e:
        raise ExternalCommandError(cmd, e.returncode) from e
    log.info("process.scaffold_finished", dest=str(settings.dest_root))


def start_install(settings: MigrationSettings, wait: bool = False) -> subprocess.Popen:
    """Start the package installation in the destination project.

    Fire-and-forget by default: the child keeps streaming to stdout and may
    outlive the caller. With *wait* the call blocks and a non-zero exit
    raises :class:`ExternalCommandError`.
    """
    cmd = list(settings.install_command)
    try:
        proc = subprocess.Popen(cmd, cwd=settings.dest_root)
    except FileNotFoundError as e:
        raise ExternalCommandError(cmd, None, str(e)) from e
    log.info("process.install_started", cmd=cmd, pid=proc.pid)

    if wait:
        returncode = proc.wait()
        if returncode != 0:
            raise ExternalCommandError(cmd, returncode)
        log.info("process.install_finished", cmd=cmd)
    return proc
