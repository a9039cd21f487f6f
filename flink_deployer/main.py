"""Main module entrypoint for local runtime execution.

This module validates startup configuration and runs one job update, one
direct deployment, or the FastAPI service.
"""

import argparse
import sys

import uvicorn

from flink_deployer.bootstrap import (
    bootstrap_configure_logging,
    bootstrap_create_application,
    bootstrap_create_deployer,
    bootstrap_create_update_orchestrator,
)
from flink_deployer.config import config_load_settings
from flink_deployer.domain import DeployerError, DeploymentRequest, UpdateRequest


def main_build_argument_parser() -> argparse.ArgumentParser:
    """Build the runtime argument parser.

    Returns:
        argparse.ArgumentParser: Parser with `api`, `update` and `deploy` commands.
    """

    argument_parser = argparse.ArgumentParser(description="Flink job deployer runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "update", "deploy"),
        help="Runtime command: `api` starts server, `update` savepoints and redeploys a running job, "
        "`deploy` submits a job directly",
        type=str,
    )
    argument_parser.add_argument("--job-name", dest="job_name", default="", type=str, help="Job name to update")
    argument_parser.add_argument("--run-args", dest="run_args", default="", type=str, help="Extra `flink run` arguments")
    argument_parser.add_argument("--local-filename", dest="local_filename", default="", type=str, help="Local job jar")
    argument_parser.add_argument("--remote-filename", dest="remote_filename", default="", type=str, help="Remote job jar URL")
    argument_parser.add_argument("--api-token", dest="api_token", default="", type=str, help="Token for the remote jar")
    argument_parser.add_argument("--jar-args", dest="jar_args", default="", type=str, help="Job main class arguments")
    argument_parser.add_argument(
        "--savepoint-dir",
        dest="savepoint_directory",
        default="",
        type=str,
        help="Directory holding savepoints, used when no instance is running (`update`)",
    )
    argument_parser.add_argument(
        "--savepoint-path",
        dest="savepoint_path",
        default="",
        type=str,
        help="Savepoint to restore from (`deploy`)",
    )
    argument_parser.add_argument(
        "--allow-non-restorable-state",
        dest="allow_non_restorable_state",
        action="store_true",
        help="Skip savepoint state that cannot be mapped to the new program",
    )
    return argument_parser


def main(argv: list[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to process arguments.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when an update or deployment fails.
    """

    parsed_arguments = main_build_argument_parser().parse_args(argv)

    if parsed_arguments.command == "api":
        settings = config_load_settings()
        application = bootstrap_create_application()
        uvicorn.run(
            application,
            host=settings.application_host,
            port=settings.application_port,
        )
        return

    settings = config_load_settings()
    bootstrap_configure_logging(settings)
    try:
        if parsed_arguments.command == "update":
            update_orchestrator = bootstrap_create_update_orchestrator(settings)
            execution_result = update_orchestrator.job_execute(
                UpdateRequest(
                    job_name=parsed_arguments.job_name,
                    run_args=parsed_arguments.run_args,
                    local_filename=parsed_arguments.local_filename,
                    remote_filename=parsed_arguments.remote_filename,
                    api_token=parsed_arguments.api_token,
                    jar_args=parsed_arguments.jar_args,
                    savepoint_directory=parsed_arguments.savepoint_directory
                    or (settings.default_savepoint_directory or ""),
                    allow_non_restorable_state=parsed_arguments.allow_non_restorable_state,
                )
            )
            deploy_output = execution_result.deploy_output
        else:
            deployer = bootstrap_create_deployer(settings)
            deploy_output = deployer.deploy_submit(
                DeploymentRequest(
                    run_args=parsed_arguments.run_args,
                    local_filename=parsed_arguments.local_filename,
                    remote_filename=parsed_arguments.remote_filename,
                    api_token=parsed_arguments.api_token,
                    jar_args=parsed_arguments.jar_args,
                    savepoint_path=parsed_arguments.savepoint_path or None,
                    allow_non_restorable_state=parsed_arguments.allow_non_restorable_state,
                )
            )
    except DeployerError as error:
        print(f"{parsed_arguments.command} failed: {error.message}", file=sys.stderr)
        raise SystemExit(1) from error

    sys.stdout.write(deploy_output.decode("utf-8", errors="replace"))


if __name__ == "__main__":
    main()
