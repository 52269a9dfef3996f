"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service
or runs one batch analytics recompute.
"""

import argparse

import uvicorn

from app.bootstrap import bootstrap_create_application, bootstrap_create_recalculation_orchestrator
from app.config import config_load_settings
from app.jobs import ANALYTICS_RECALCULATE_JOB_ID


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when the batch recompute does not fully succeed.
    """

    argument_parser = argparse.ArgumentParser(description="Options trade journal runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "analytics-recalculate"),
        help="Runtime command: `api` starts server, `analytics-recalculate` recomputes "
        "analytics snapshots for every user once",
        type=str,
    )
    parsed_arguments = argument_parser.parse_args()

    if parsed_arguments.command == "analytics-recalculate":
        orchestrator = bootstrap_create_recalculation_orchestrator()
        execution_result = orchestrator.job_execute(job_name=ANALYTICS_RECALCULATE_JOB_ID)
        if not execution_result.job_succeeded:
            raise SystemExit(1)
        return

    settings = config_load_settings()
    application = bootstrap_create_application()
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


if __name__ == "__main__":
    main()
